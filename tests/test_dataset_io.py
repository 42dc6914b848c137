import numpy as np
import pytest

from ml_toolkit.data.dataset import (
    as_integer_labels,
    load_labels,
    load_matrix,
    save_labels,
    save_matrix,
)
from ml_toolkit.errors import DatasetIOError


def test_load_matrix_transposes_rows_into_columns(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("1,2,3\n4,5,6\n")

    matrix = load_matrix(path)
    np.testing.assert_array_equal(matrix, [[1, 4], [2, 5], [3, 6]])
    np.testing.assert_array_equal(load_matrix(path, transpose=False), [[1, 2, 3], [4, 5, 6]])


@pytest.mark.parametrize("name", ["data.csv", "data.tsv", "data.txt", "data.npy"])
def test_save_then_load_each_format(tmp_path, name):
    matrix = np.array([[0.5, -1.25, 3.0], [2.0, 1e-3, 7.0]])
    path = tmp_path / "nested" / name

    save_matrix(path, matrix)
    np.testing.assert_allclose(load_matrix(path), matrix)


def test_save_overwrites(tmp_path):
    path = tmp_path / "data.csv"
    save_matrix(path, np.ones((2, 4)))
    save_matrix(path, np.zeros((2, 1)))
    assert load_matrix(path).shape == (2, 1)


def test_missing_file(tmp_path):
    with pytest.raises(DatasetIOError):
        load_matrix(tmp_path / "absent.csv")


def test_unparseable_file(tmp_path):
    path = tmp_path / "broken.csv"
    path.write_text("1,2\nthree,4\n")
    with pytest.raises(DatasetIOError):
        load_matrix(path)


def test_unknown_extension(tmp_path):
    path = tmp_path / "data.arff"
    path.write_text("1,2\n")
    with pytest.raises(DatasetIOError):
        load_matrix(path)


def test_labels_as_column_or_row(tmp_path):
    column = tmp_path / "column.csv"
    column.write_text("1\n2\n3\n")
    row = tmp_path / "row.csv"
    row.write_text("1,2,3\n")

    np.testing.assert_array_equal(load_labels(column), [1, 2, 3])
    np.testing.assert_array_equal(load_labels(row), [1, 2, 3])


def test_labels_must_be_a_vector(tmp_path):
    path = tmp_path / "labels.csv"
    path.write_text("1,2\n3,4\n")
    with pytest.raises(DatasetIOError):
        load_labels(path)


def test_integer_labels():
    np.testing.assert_array_equal(as_integer_labels(np.array([1.0, -2.0, 5.0])), [1, -2, 5])
    with pytest.raises(DatasetIOError):
        as_integer_labels(np.array([1.0, 2.5]))


def test_save_labels_writes_one_integer_per_line(tmp_path):
    path = tmp_path / "labels.csv"
    save_labels(path, np.array([3, 1, 4]))
    assert path.read_text().split() == ["3", "1", "4"]
