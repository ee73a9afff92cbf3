import numpy as np
import pytest

from swarmdriver.data.parameters import format_parameters, load_parameters, parse_parameters, save_parameters


def test_save_then_load_is_exact(tmp_path, rng):
    vec = rng.normal(size=40) * 1e3
    vec[0] = 1.0 / 3.0
    vec[1] = -0.0
    path = save_parameters(tmp_path / "params.txt", vec)
    loaded = load_parameters(path, expected_length=40)
    assert loaded.tobytes() == vec.tobytes()


def test_file_format_is_whitespace_separated_without_header(tmp_path):
    path = save_parameters(tmp_path / "p.txt", [1.5, -2.0, 3.0])
    assert path.read_text() == "1.5 -2.0 3.0\n"


def test_overwrite_leaves_no_temporary_files(tmp_path):
    path = tmp_path / "p.txt"
    save_parameters(path, [1.0])
    save_parameters(path, [2.0, 3.0])
    assert load_parameters(path).tolist() == [2.0, 3.0]
    assert sorted(p.name for p in tmp_path.iterdir()) == ["p.txt"]


def test_save_creates_parent_directories(tmp_path):
    path = save_parameters(tmp_path / "a" / "b" / "p.txt", [0.0])
    assert path.exists()


def test_load_accepts_any_whitespace():
    assert parse_parameters("1 2\n3\t4\n\n").tolist() == [1.0, 2.0, 3.0, 4.0]


def test_missing_file_propagates(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_parameters(tmp_path / "nope.txt")


@pytest.mark.parametrize("text", ["", "   \n", "1.0 abc 2.0"])
def test_bad_content_rejected(tmp_path, text):
    path = tmp_path / "bad.txt"
    path.write_text(text)
    with pytest.raises(ValueError):
        load_parameters(path)


def test_length_mismatch_rejected(tmp_path):
    path = save_parameters(tmp_path / "p.txt", [1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        load_parameters(path, expected_length=4)


def test_format_flattens():
    assert format_parameters(np.array([[1.0, 2.0]])) == "1.0 2.0\n"
