#!/usr/bin/env python3
"""
Tests for the command-line interface.
"""

import json

import pytest
from openpyxl import Workbook, load_workbook

from release_tokenizer import FilenameParser
from release_tokenizer.cli import (
    ReportRow,
    build_arg_parser,
    calculate_metrics,
    main,
    read_input_file,
)

FILENAMES = [
    "[Thora] Show - 01 [720p].mkv",
    "Show.Name.S01E02.1080p.mkv",
    "A.B_C",
]


@pytest.fixture
def input_txt(tmp_path):
    path = tmp_path / "filenames.txt"
    path.write_text("\n".join(FILENAMES[:2]) + "\n\n" + FILENAMES[2] + "\n", encoding="utf-8")
    return path


@pytest.fixture
def input_xlsx(tmp_path):
    path = tmp_path / "filenames.xlsx"
    wb = Workbook()
    ws = wb.active
    ws.append(["id", "Input"])
    for idx, filename in enumerate(FILENAMES, 1):
        ws.append([idx, filename])
    ws.append([99, None])
    wb.save(path)
    return path


class TestReadInputFile:

    def test_text_file_skips_blank_lines(self, input_txt):
        assert read_input_file(input_txt) == FILENAMES

    def test_limit(self, input_txt):
        assert read_input_file(input_txt, limit=2) == FILENAMES[:2]

    def test_excel_input_column(self, input_xlsx):
        assert read_input_file(input_xlsx) == FILENAMES

    def test_excel_without_input_column(self, tmp_path):
        path = tmp_path / "bad.xlsx"
        wb = Workbook()
        wb.active.append(["filename"])
        wb.save(path)

        with pytest.raises(ValueError):
            read_input_file(path)


class TestReportRow:

    def test_from_result(self):
        result = FilenameParser().tokenize("[Thora] Show - 01 [720p].mkv")
        row = ReportRow.from_result(result)

        assert row.identifiers == ["Thora", "720p"]
        assert row.unknown == ["Show", "-", "01", "mkv"]
        assert row.elements == ["Thora(release_group)", "720p(video_resolution)"]
        assert row.success

        excel_row = row.to_excel_row()
        assert len(excel_row) == len(ReportRow.get_headers())
        assert excel_row[0] == "[Thora] Show - 01 [720p].mkv"
        assert excel_row[-1] == len(row.tokens)

    def test_metrics(self):
        parser = FilenameParser()
        rows = [ReportRow.from_result(result) for result in parser.parse_many(FILENAMES + [""])]

        metrics = calculate_metrics(rows)

        assert metrics["total_rows"] == 4
        assert metrics["empty_results"] == 1
        assert metrics["element_categories"] == {"video_resolution": 2, "release_group": 1}
        assert {"token": "mkv", "count": 2} in metrics["top_unknown_tokens"]

    def test_metrics_without_rows(self):
        metrics = calculate_metrics([])
        assert metrics["total_rows"] == 0
        assert metrics["avg_tokens"] == 0.0


class TestCommands:

    def test_subcommand_is_required(self):
        with pytest.raises(SystemExit):
            build_arg_parser().parse_args([])

    def test_tokenize_prints_json(self, capsys):
        assert main(["tokenize", "[Thora].mkv", "A.B_C"]) == 0

        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 2
        first = json.loads(lines[0])
        assert first["pattern"] == "[{identifier}].{token0}"
        assert [t["content"] for t in json.loads(lines[1])["tokens"]] == ["A.B", "_", "C"]

    def test_delimiter_override(self, capsys):
        assert main(["--delimiters", " ", "tokenize", "A.B C"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert [t["content"] for t in data["tokens"]] == ["A.B", " ", "C"]

    def test_config_file(self, tmp_path, capsys):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"parser": {"allowed_delimiters": "_"}}), encoding="utf-8")

        assert main(["--config", str(config), "tokenize", "a b_c"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert [t["content"] for t in data["tokens"]] == ["a b", "_", "c"]

    def test_report_from_text_file(self, input_txt, tmp_path, capsys):
        output_excel = tmp_path / "out" / "tokens.xlsx"
        output_json = tmp_path / "out" / "tokens.json"

        exit_code = main([
            "report", "--input", str(input_txt),
            "--output-excel", str(output_excel),
            "--output-json", str(output_json),
        ])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert f"Excel output: {output_excel}" in out
        assert "Tokenized 3 filenames (0 empty)" in out

        metrics = json.loads(output_json.read_text(encoding="utf-8"))
        assert metrics["total_rows"] == 3

        wb = load_workbook(output_excel)
        try:
            ws = wb["Tokens"]
            assert [cell.value for cell in ws[1]] == ReportRow.get_headers()
            assert ws.cell(row=2, column=1).value == FILENAMES[0]
            assert ws.max_row == 4
        finally:
            wb.close()

    def test_report_from_excel_with_limit(self, input_xlsx, tmp_path, capsys):
        output_excel = tmp_path / "tokens.xlsx"
        output_json = tmp_path / "tokens.json"

        exit_code = main([
            "report", "--input", str(input_xlsx), "--limit", "2",
            "--output-excel", str(output_excel),
            "--output-json", str(output_json),
            "--skip-excel",
        ])

        assert exit_code == 0
        assert not output_excel.exists()
        assert json.loads(output_json.read_text(encoding="utf-8"))["total_rows"] == 2
        assert "Excel output" not in capsys.readouterr().out

    def test_report_missing_input(self, tmp_path):
        assert main(["report", "--input", str(tmp_path / "missing.txt")]) == 1

    def test_validate_packaged_dictionary(self, capsys):
        assert main(["validate"]) == 0
        assert "keywords.json validated successfully." in capsys.readouterr().out

    def test_validate_reports_failures(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"keywords": [{"category": "nope", "keywords": ["X"]}]}), encoding="utf-8")

        assert main(["validate", str(path)]) == 1
        out = capsys.readouterr().out
        assert "Dictionary validation failed:" in out
        assert "unknown category 'nope'" in out
