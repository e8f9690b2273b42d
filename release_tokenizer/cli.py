#!/usr/bin/env python3
"""
Command-line interface for the release filename tokenizer.

Commands:
- tokenize: print the token stream of one or more filenames as JSON
- report:   tokenize a list of filenames and write Excel + JSON metrics
- validate: check a keyword dictionary against its schema and rules
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from openpyxl import load_workbook

from .dictionary_loader import DictionaryLoader
from .dictionary_validator import validate_dictionary_file
from .excel_writer import ExcelSheetData, write_excel_workbook
from .options import load_options
from .parser import FilenameParser
from .token import TokenCategory
from .tokenizer import TokenizationResult

logger = logging.getLogger(__name__)


@dataclass
class ReportRow:
    """Represents a single tokenized filename in the report."""
    input: str
    pattern: str
    tokens: List[str]
    identifiers: List[str]
    unknown: List[str]
    elements: List[str]
    element_categories: List[str]
    success: bool

    @classmethod
    def from_result(cls, result: TokenizationResult) -> "ReportRow":
        def contents(category: TokenCategory) -> List[str]:
            return [token.content for token in result.tokens if token.category is category]

        return cls(
            input=result.filename,
            pattern=result.pattern,
            tokens=[token.content for token in result.tokens],
            identifiers=contents(TokenCategory.IDENTIFIER),
            unknown=contents(TokenCategory.UNKNOWN),
            elements=[f"{e.value}({e.category.value})" for e in result.elements],
            element_categories=[e.category.value for e in result.elements],
            success=result.success,
        )

    def to_excel_row(self) -> List[Any]:
        """Convert to Excel row maintaining column order."""
        return [
            self.input,
            self.pattern,
            " | ".join(self.tokens),
            " | ".join(self.identifiers),
            " | ".join(self.unknown),
            " | ".join(self.elements),
            len(self.tokens),
        ]

    @staticmethod
    def get_headers() -> List[str]:
        return ["input", "pattern", "tokens", "identifiers", "unknown", "elements", "token_count"]


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="release-tokenizer",
        description="Tokenize media release filenames",
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    parser.add_argument('--config', help='JSON config file with parser options')
    parser.add_argument('--delimiters', help='Override the allowed delimiter characters')

    subparsers = parser.add_subparsers(dest='command', required=True)

    tokenize_cmd = subparsers.add_parser('tokenize', help='Print tokens of filenames as JSON')
    tokenize_cmd.add_argument('filenames', nargs='+', help='Filenames to tokenize')

    report_cmd = subparsers.add_parser('report', help='Tokenize a list of filenames into a report')
    report_cmd.add_argument(
        '--input',
        required=True,
        help='Input file containing filenames (one per line) or an Excel workbook with an "input" column'
    )
    report_cmd.add_argument('--output-excel', help='Output Excel path (default: reports/tokens-YYYYMMDD-HHMMSS.xlsx)')
    report_cmd.add_argument('--output-json', help='Output JSON metrics path (default: reports/tokens-YYYYMMDD-HHMMSS.json)')
    report_cmd.add_argument('--limit', type=int, help='Limit number of files to process')
    report_cmd.add_argument('--skip-excel', action='store_true', help='Only write the JSON metrics')

    validate_cmd = subparsers.add_parser('validate', help='Validate a keyword dictionary file')
    validate_cmd.add_argument('path', nargs='?', help='Dictionary file (default: packaged keywords.json)')

    return parser


def read_input_file(filepath: Union[str, Path], limit: Optional[int] = None) -> List[str]:
    """
    Read input file and return list of filenames.
    Handles text files and Excel files.
    """
    filepath = Path(filepath)
    filenames: List[str] = []

    if filepath.suffix == '.xlsx':
        wb = load_workbook(filepath, read_only=True)
        try:
            ws = wb.active
            if ws is None:
                raise ValueError("Excel file has no usable worksheet")

            headers = [cell.value for cell in next(ws.iter_rows(min_row=1, max_row=1), ())]
            input_col_idx = None
            for idx, header in enumerate(headers):
                if header is not None and str(header).strip().lower() == 'input':
                    input_col_idx = idx
                    break

            if input_col_idx is None:
                raise ValueError("Could not find 'input' column in Excel file")

            for row in ws.iter_rows(min_row=2, values_only=True):
                if row and input_col_idx < len(row) and row[input_col_idx]:
                    filenames.append(str(row[input_col_idx]))
                    if limit and len(filenames) >= limit:
                        break
        finally:
            wb.close()
    else:
        with filepath.open('r', encoding='utf-8', errors='replace') as f:
            for line in f:
                line = line.rstrip('\r\n')
                if line.strip():
                    filenames.append(line)
                    if limit and len(filenames) >= limit:
                        break

    return filenames


def calculate_metrics(rows: Sequence[ReportRow]) -> Dict[str, Any]:
    """
    Summarize a batch of tokenized filenames.

    Metrics include the number of empty results, a histogram of element
    categories, the most common patterns and the most common unknown tokens.
    """
    total_rows = len(rows)
    element_categories = Counter(category for row in rows for category in row.element_categories)

    patterns = Counter(row.pattern for row in rows if row.pattern)
    unknown_tokens = Counter(token for row in rows for token in row.unknown)
    avg_tokens = sum(len(row.tokens) for row in rows) / total_rows if total_rows else 0.0

    return {
        'total_rows': total_rows,
        'empty_results': sum(1 for row in rows if not row.success),
        'avg_tokens': round(avg_tokens, 4),
        'element_categories': dict(element_categories.most_common()),
        'pattern_histogram': [{'pattern': p, 'count': c} for p, c in patterns.most_common(20)],
        'top_unknown_tokens': [{'token': t, 'count': c} for t, c in unknown_tokens.most_common(20)],
        'timestamp': datetime.now().isoformat(),
    }


def run_tokenize(parser: FilenameParser, filenames: Sequence[str]) -> int:
    for filename in filenames:
        print(parser.tokenize(filename).to_json())
    return 0


def run_report(parser: FilenameParser, args: argparse.Namespace) -> int:
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    output_excel = Path(args.output_excel) if args.output_excel else Path("reports") / f"tokens-{timestamp}.xlsx"
    output_json = Path(args.output_json) if args.output_json else Path("reports") / f"tokens-{timestamp}.json"

    filenames = read_input_file(args.input, args.limit)
    logger.info("Found %d filenames to process", len(filenames))

    rows = []
    for idx, result in enumerate(parser.parse_many(filenames), 1):
        if idx % 1000 == 0:
            logger.info("Processed %d/%d...", idx, len(filenames))
        rows.append(ReportRow.from_result(result))

    metrics = calculate_metrics(rows)

    if not args.skip_excel:
        sheet = ExcelSheetData(
            name="Tokens",
            headers=ReportRow.get_headers(),
            rows=[row.to_excel_row() for row in rows],
            highlighted_rows=[not row.success or bool(row.unknown) for row in rows],
        )
        write_excel_workbook(output_excel, [sheet])
        print(f"Excel output: {output_excel}")

    output_json.parent.mkdir(parents=True, exist_ok=True)
    output_json.write_text(json.dumps(metrics, indent=2, ensure_ascii=False), encoding='utf-8')
    print(f"JSON output: {output_json}")
    print(f"Tokenized {metrics['total_rows']} filenames ({metrics['empty_results']} empty)")
    return 0


def run_validate(path: Optional[str]) -> int:
    dictionary_path = Path(path) if path else DictionaryLoader.get_dictionary_path()
    failures = validate_dictionary_file(dictionary_path)

    if failures:
        print("Dictionary validation failed:")
        for failure in failures:
            print(f" - {failure}")
        return 1

    print(f"{dictionary_path.name} validated successfully.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[release-tokenizer] %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    if args.command == 'validate':
        return run_validate(args.path)

    options = load_options(args.config, {"allowed_delimiters": args.delimiters})
    parser = FilenameParser(options=options)

    try:
        if args.command == 'tokenize':
            return run_tokenize(parser, args.filenames)
        return run_report(parser, args)
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == '__main__':
    sys.exit(main())
