"""Export and load functionality for curricula and plans."""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import pandas as pd

from .exceptions import StructuralInputError
from .scheduler.models import SolveResult


class BaseExporter(ABC):
    """Base class for plan exporters."""

    @abstractmethod
    def export(self, result: SolveResult, output_path: str | Path) -> None:
        """Export a solve result to file.

        Args:
            result: SolveResult to export
            output_path: Path to output file
        """
        pass


class JSONExporter(BaseExporter):
    """Export to the JSON wire shape."""

    def __init__(self, indent: int = 2, ensure_ascii: bool = False):
        """Initialize exporter.

        Args:
            indent: JSON indentation level
            ensure_ascii: If False, allows non-ASCII characters
        """
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def export(self, result: SolveResult, output_path: str | Path) -> None:
        write_json(result.to_dict(), output_path, self.indent, self.ensure_ascii)


class CSVExporter(BaseExporter):
    """Export one row per placed class."""

    def export(self, result: SolveResult, output_path: str | Path) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        plan_to_dataframe(result).to_csv(output_path, index=False, encoding="utf-8")


def plan_to_dataframe(result: SolveResult) -> pd.DataFrame:
    """Flatten a plan into a DataFrame sorted by period and class id."""
    rows = [
        {
            "class_id": class_id,
            "period": placement.period,
            "option_index": placement.option_index,
            "filtered_option_index": placement.filtered_option_index,
        }
        for class_id, placement in result.assignments.items()
    ]
    df = pd.DataFrame(
        rows, columns=["class_id", "period", "option_index", "filtered_option_index"]
    )
    return df.sort_values(["period", "class_id"]).reset_index(drop=True)


def get_exporter(format: str) -> BaseExporter:
    """Get exporter by format name.

    Args:
        format: Format name ('json' or 'csv')

    Returns:
        Exporter instance

    Raises:
        ValueError: If format is not supported
    """
    exporters = {
        "json": JSONExporter,
        "csv": CSVExporter,
    }

    if format not in exporters:
        raise ValueError(f"Unsupported format: {format}. Use one of: {list(exporters.keys())}")

    return exporters[format]()


def write_json(
    data: Any, output_path: str | Path, indent: int = 2, ensure_ascii: bool = False
) -> None:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=ensure_ascii)


def load_json(input_path: str | Path) -> Any:
    with open(input_path, encoding="utf-8") as f:
        return json.load(f)


def load_curriculum(input_path: str | Path) -> list[Any]:
    """Load curriculum records from JSON.

    Accepts either a bare array of classes or an object with a ``classes``
    array.

    Raises:
        StructuralInputError: If the file holds neither shape
    """
    data = load_json(input_path)
    if isinstance(data, dict):
        data = data.get("classes")
    if not isinstance(data, list):
        raise StructuralInputError(
            f"{input_path} must contain a list of classes or an object with a 'classes' list"
        )
    return data
