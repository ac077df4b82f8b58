"""Tests for multi-file scans across worker processes."""
from __future__ import annotations

import pickle

import pytest

from rxtract.errors import ConfigError, FieldError
from rxtract.parsers.extractor import ParserConfig
from rxtract.perf.parallel_parser import FileResult, parse_files_parallel


@pytest.fixture()
def three_files(tmp_log_file):
    return [
        str(tmp_log_file([f"f{n}-{i} load=1 up=1s" for i in range(n + 1)], name=f"f{n}.log"))
        for n in range(3)
    ]


class TestParseFilesParallel:
    def test_results_in_input_order(self, line_config, three_files) -> None:
        config = ParserConfig.model_validate(line_config)
        results = parse_files_parallel(config, three_files, workers=2)
        assert [r.path for r in results] == three_files
        assert [len(r.records) for r in results] == [1, 2, 3]
        assert results[2].records[2].as_dict()["host"] == "f2-2"

    def test_sequential_matches_parallel(self, line_config, three_files) -> None:
        config = ParserConfig.model_validate(line_config)
        one = parse_files_parallel(config, three_files, workers=1)
        many = parse_files_parallel(config, three_files, workers=3)
        assert [[r.data for r in f.records] for f in one] == [[r.data for r in f.records] for f in many]

    def test_limit_per_file(self, line_config, three_files) -> None:
        config = ParserConfig.model_validate(line_config)
        results = parse_files_parallel(config, three_files, workers=1, limit=1)
        assert [len(r.records) for r in results] == [1, 1, 1]

    def test_no_paths(self, line_config) -> None:
        assert parse_files_parallel(ParserConfig.model_validate(line_config), []) == []

    def test_invalid_config_fails_up_front(self, tmp_log_file) -> None:
        config = ParserConfig(rules=())
        with pytest.raises(ConfigError):
            parse_files_parallel(config, [str(tmp_log_file(["x"]))])

    def test_errors_cross_process_boundary(self, line_config, tmp_log_file) -> None:
        config = ParserConfig.model_validate(line_config)
        paths = [
            str(tmp_log_file(["a load=bad up=1s"], name="a.log")),
            str(tmp_log_file(["b load=1 up=1s"], name="b.log")),
        ]
        results = parse_files_parallel(config, paths, workers=2)
        assert results[0].error_count == 1
        assert isinstance(results[0].records[0].errors[0], FieldError)
        assert results[1].error_count == 0


def test_file_result_pickles(line_config, tmp_log_file) -> None:
    config = ParserConfig.model_validate(line_config)
    result = parse_files_parallel(config, [str(tmp_log_file(["a load=x up=1s"]))])[0]
    restored: FileResult = pickle.loads(pickle.dumps(result))
    assert restored.records[0].data == result.records[0].data
    assert str(restored.records[0].errors[0]) == str(result.records[0].errors[0])
