import io

from xv6kit.textutils import (
    DIRSIZ,
    FileType,
    WordCount,
    cat,
    cat_main,
    echo,
    echo_main,
    fmtname,
    ls,
    ls_main,
    wc_main,
    word_count,
)


def test_word_count_small():
    assert word_count(io.StringIO("hello world\nbye\n")) == WordCount(2, 3, 16)


def test_word_count_invariants_across_chunks():
    text = "alpha  beta\tgamma\r\n" * 100
    result = word_count(io.StringIO(text))
    assert result.chars == len(text)
    assert result.lines == text.count("\n")
    assert result.words == len(text.split())


def test_word_count_bytes_and_nul_is_space():
    result = word_count(io.BytesIO(b"ab\0cd"))
    assert result.words == 2
    assert result.lines == 0


def test_word_count_empty():
    assert word_count(io.StringIO("")) == WordCount()


def test_cat_copies_everything():
    data = bytes(range(256)) * 5
    out = io.BytesIO()
    cat(io.BytesIO(data), out)
    assert out.getvalue() == data


def test_echo():
    assert echo(["a", "b"]) == "a b\n"
    assert echo([]) == ""


def test_echo_main(capsys):
    assert echo_main(["x", "y"]) == 0
    assert capsys.readouterr().out == "x y\n"


def test_fmtname_pads_short_names():
    name = fmtname("dir/sub/name")
    assert len(name) == DIRSIZ
    assert name.rstrip(" ") == "name"


def test_fmtname_keeps_long_names():
    long_name = "n" * (DIRSIZ + 3)
    assert fmtname("x/" + long_name) == long_name


def test_ls_file(tmp_path):
    path = tmp_path / "data"
    path.write_bytes(b"12345")
    (line,) = ls(str(path))
    name, kind, _ino, size = line.split()
    assert name == "data"
    assert int(kind) == FileType.FILE
    assert int(size) == 5


def test_ls_directory(tmp_path):
    (tmp_path / "f").write_text("x")
    (tmp_path / "sub").mkdir()
    entries = {line.split()[0]: int(line.split()[1]) for line in ls(str(tmp_path))}
    assert entries["."] == FileType.DIR
    assert entries[".."] == FileType.DIR
    assert entries["f"] == FileType.FILE
    assert entries["sub"] == FileType.DIR


def test_ls_main_missing(tmp_path, capsys):
    missing = tmp_path / "missing"
    assert ls_main([str(missing)]) == 0
    assert capsys.readouterr().err == f"ls: cannot open {missing}\n"


def test_wc_main(tmp_path, capsys):
    path = tmp_path / "w.txt"
    text = "one two\nthree\n"
    path.write_text(text)
    assert wc_main([str(path)]) == 0
    lines, words, chars, name = capsys.readouterr().out.split()
    assert (int(lines), int(words), int(chars)) == (text.count("\n"), 3, len(text))
    assert name == str(path)


def test_wc_main_missing(tmp_path, capsys):
    missing = tmp_path / "missing"
    assert wc_main([str(missing)]) == 1
    assert capsys.readouterr().out == f"wc: cannot open {missing}\n"


def test_cat_main(tmp_path, capsys):
    path = tmp_path / "c.txt"
    path.write_text("some text\n")
    assert cat_main([str(path)]) == 0
    assert capsys.readouterr().out == "some text\n"


def test_cat_main_missing(tmp_path, capsys):
    missing = tmp_path / "missing"
    assert cat_main([str(missing)]) == 1
    assert capsys.readouterr().out == f"cat: cannot open {missing}\n"