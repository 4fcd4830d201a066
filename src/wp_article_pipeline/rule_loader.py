"""
SEO link rule loading from JSON, CSV and Excel files.

This module handles ingestion of link rules from:
- JSON files (a list of {"keyword", "url", "maxCount"} objects, the shape
  stored on article records)
- CSV files
- Excel files (.xlsx, .xls)
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd

from .models import SeoLinkRule

logger = logging.getLogger(__name__)


class RuleLoadError(Exception):
    """Raised when rule loading fails."""
    pass


# Common column name variations for rule data
KEYWORD_COLUMN_VARIANTS = ["keyword", "keywords", "anchor", "anchor_text", "phrase", "term"]
URL_COLUMN_VARIANTS = ["url", "link", "target_url", "href", "destination"]
COUNT_COLUMN_VARIANTS = ["max_count", "maxcount", "count", "max", "limit", "occurrences"]


def _normalize_column_name(name: str) -> str:
    """Normalize column name for matching."""
    return str(name).lower().strip().replace(" ", "_").replace("-", "_")


def _find_column(df: pd.DataFrame, variants: list[str]) -> Optional[str]:
    """
    Find a column in the DataFrame matching one of the variant names.

    Args:
        df: The DataFrame to search.
        variants: List of possible column name variants.

    Returns:
        The actual column name if found, None otherwise.
    """
    normalized_columns = {_normalize_column_name(col): col for col in df.columns}

    for variant in variants:
        normalized = _normalize_column_name(variant)
        if normalized in normalized_columns:
            return normalized_columns[normalized]

    return None


def rules_from_records(records: Any) -> list[SeoLinkRule]:
    """
    Build rules from decoded JSON records.

    Records with an empty keyword or url are dropped.

    Args:
        records: A list of dicts, or a dict with a "seoLinks"/"rules" list.

    Returns:
        List of SeoLinkRule objects.

    Raises:
        RuleLoadError: If records is not a list of objects.
    """
    if isinstance(records, dict):
        records = records.get("seoLinks", records.get("rules"))

    if not isinstance(records, list):
        raise RuleLoadError("Expected a list of rule objects")

    rules: list[SeoLinkRule] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise RuleLoadError(f"Rule {index + 1} is not an object")
        rule = SeoLinkRule.from_dict(record)
        if not rule.is_applicable:
            logger.warning(f"Dropping rule {index + 1}: keyword and url are required")
            continue
        rules.append(rule)

    return rules


def load_rules_from_json(file_path: Union[str, Path]) -> list[SeoLinkRule]:
    """
    Load rules from a JSON file.

    Args:
        file_path: Path to the JSON file.

    Returns:
        List of SeoLinkRule objects.

    Raises:
        RuleLoadError: If the file cannot be read or parsed.
    """
    path = Path(file_path)

    if not path.exists():
        raise RuleLoadError(f"File not found: {file_path}")

    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise RuleLoadError(f"Failed to read JSON file: {e}")

    rules = rules_from_records(records)
    if not rules:
        raise RuleLoadError("No valid rules found in file")
    return rules


def load_rules_from_csv(file_path: Union[str, Path]) -> list[SeoLinkRule]:
    """
    Load rules from a CSV file.

    Args:
        file_path: Path to the CSV file.

    Returns:
        List of SeoLinkRule objects.

    Raises:
        RuleLoadError: If the file cannot be read or parsed.
    """
    path = Path(file_path)

    if not path.exists():
        raise RuleLoadError(f"File not found: {file_path}")

    try:
        df = pd.read_csv(path, encoding="utf-8")
    except UnicodeDecodeError:
        try:
            df = pd.read_csv(path, encoding="latin-1")
        except Exception as e:
            raise RuleLoadError(f"Failed to read CSV file: {e}")
    except Exception as e:
        raise RuleLoadError(f"Failed to read CSV file: {e}")

    return _parse_rule_dataframe(df)


def load_rules_from_excel(file_path: Union[str, Path], sheet_name: Optional[str] = None) -> list[SeoLinkRule]:
    """
    Load rules from an Excel file.

    Args:
        file_path: Path to the Excel file (.xlsx or .xls).
        sheet_name: Optional sheet name to read from. Defaults to first sheet.

    Returns:
        List of SeoLinkRule objects.

    Raises:
        RuleLoadError: If the file cannot be read or parsed.
    """
    path = Path(file_path)

    if not path.exists():
        raise RuleLoadError(f"File not found: {file_path}")

    try:
        if sheet_name:
            df = pd.read_excel(path, sheet_name=sheet_name)
        else:
            df = pd.read_excel(path)
    except Exception as e:
        raise RuleLoadError(f"Failed to read Excel file: {e}")

    return _parse_rule_dataframe(df)


def _parse_rule_dataframe(df: pd.DataFrame) -> list[SeoLinkRule]:
    """
    Parse a DataFrame into a list of SeoLinkRule objects.

    Args:
        df: DataFrame containing rule data.

    Returns:
        List of SeoLinkRule objects.

    Raises:
        RuleLoadError: If required columns are missing.
    """
    if df.empty:
        raise RuleLoadError("Rule file is empty")

    keyword_col = _find_column(df, KEYWORD_COLUMN_VARIANTS)
    if keyword_col is None:
        raise RuleLoadError(
            f"No keyword column found. Expected one of: {', '.join(KEYWORD_COLUMN_VARIANTS)}. "
            f"Found columns: {', '.join(str(c) for c in df.columns)}"
        )
    url_col = _find_column(df, URL_COLUMN_VARIANTS)
    if url_col is None:
        raise RuleLoadError(
            f"No url column found. Expected one of: {', '.join(URL_COLUMN_VARIANTS)}. "
            f"Found columns: {', '.join(str(c) for c in df.columns)}"
        )
    count_col = _find_column(df, COUNT_COLUMN_VARIANTS)

    rules: list[SeoLinkRule] = []

    for _, row in df.iterrows():
        keyword = row[keyword_col]
        url = row[url_col]
        if pd.isna(keyword) or not str(keyword).strip():
            continue
        if pd.isna(url) or not str(url).strip():
            continue

        # Default to one link per keyword
        max_count = 1
        if count_col and not pd.isna(row[count_col]):
            try:
                max_count = max(0, int(float(row[count_col])))
            except (ValueError, TypeError):
                pass

        rules.append(
            SeoLinkRule(
                keyword=str(keyword).strip(),
                url=str(url).strip(),
                max_count=max_count,
            )
        )

    if not rules:
        raise RuleLoadError("No valid rules found in file")

    return rules


def load_rules(file_path: Union[str, Path], sheet_name: Optional[str] = None) -> list[SeoLinkRule]:
    """
    Load rules from a JSON, CSV or Excel file.

    Automatically detects file type based on extension.

    Args:
        file_path: Path to the rule file.
        sheet_name: Optional sheet name for Excel files.

    Returns:
        List of SeoLinkRule objects.

    Raises:
        RuleLoadError: If the file cannot be read or is invalid.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return load_rules_from_json(path)
    elif suffix == ".csv":
        return load_rules_from_csv(path)
    elif suffix in (".xlsx", ".xls"):
        return load_rules_from_excel(path, sheet_name)
    else:
        raise RuleLoadError(
            f"Unsupported file format: {suffix}. Supported formats: .json, .csv, .xlsx, .xls"
        )


def deduplicate_rules(rules: list[SeoLinkRule]) -> list[SeoLinkRule]:
    """
    Remove rules whose keyword repeats an earlier one (case-insensitive).

    Keeps the first occurrence of each keyword.

    Args:
        rules: List of rules to deduplicate.

    Returns:
        Deduplicated list of rules.
    """
    seen: set[str] = set()
    unique: list[SeoLinkRule] = []

    for rule in rules:
        key = rule.keyword.lower()
        if key not in seen:
            seen.add(key)
            unique.append(rule)

    return unique
