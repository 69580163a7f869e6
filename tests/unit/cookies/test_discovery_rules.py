from __future__ import annotations

from pathlib import Path

from fortune_cookie.cookies import DiscoveryRules, discover_cookie_files, is_binary_file


def _tree(root: Path) -> None:
    files = {
        "art": b"art\n",
        "art.dat": b"\x00\x00\x00\x02",
        ".hidden": b"secret\n",
        ".git/config": b"[core]\n",
        "sub/science": b"science\n",
        "off/rude": b"rude\n",
        "limericks-o": b"limerick\n",
        "README.md": b"# notes\n",
        "blob": b"\x00\x01\x02",
        "notes.pos": b"pos\n",
    }
    for rel, payload in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)


def _names(root: Path, rules: DiscoveryRules) -> list[str]:
    return [path.relative_to(root).as_posix() for path in discover_cookie_files(root, rules)]


def test_default_rules_keep_only_normal_cookie_files(tmp_path: Path) -> None:
    _tree(tmp_path)

    assert _names(tmp_path, DiscoveryRules()) == ["art", "sub/science"]


def test_all_lists_include_offensive_files(tmp_path: Path) -> None:
    _tree(tmp_path)
    rules = DiscoveryRules(include_normal=True, include_offensive=True)

    assert _names(tmp_path, rules) == ["art", "limericks-o", "off/rude", "sub/science"]


def test_offensive_only(tmp_path: Path) -> None:
    _tree(tmp_path)
    rules = DiscoveryRules(include_normal=False, include_offensive=True)

    assert _names(tmp_path, rules) == ["limericks-o", "off/rude"]


def test_discovery_order_is_stable(tmp_path: Path) -> None:
    _tree(tmp_path)

    first = discover_cookie_files(tmp_path)
    second = discover_cookie_files(tmp_path)

    assert first == second


def test_binary_sniffing(tmp_path: Path) -> None:
    text = tmp_path / "text"
    text.write_bytes(b"plain\n")
    binary = tmp_path / "binary"
    binary.write_bytes(b"plain\x00")

    assert not is_binary_file(text)
    assert is_binary_file(binary)
