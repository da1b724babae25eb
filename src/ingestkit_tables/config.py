"""Configuration model for the ingestkit-tables inference engine.

Provides ``TableParserConfig`` with every heuristic threshold the pipeline
uses.  The defaults are the values the classifiers were tuned with; they
are tunable constants, not invariants.  Supports loading overrides from
YAML or JSON files via the ``from_file()`` classmethod.
"""

from __future__ import annotations

import json
import pathlib

from pydantic import BaseModel


class TableParserConfig(BaseModel):
    """All tunable parameters with sensible defaults.

    Override individual values via constructor kwargs or load a complete
    config from a file with ``TableParserConfig.from_file(path)``.
    """

    # --- Identity ---
    parser_version: str = "ingestkit_tables:1.0.0"

    # --- Row classification ---
    data_row_numeric_ratio: float = 0.5
    data_row_min_numeric_count: int = 2
    spanning_header_max_numeric_ratio: float = 0.3
    banner_min_column_span: int = 2
    weak_data_row_numeric_ratio: float = 0.3
    early_header_row_limit: int = 3

    # --- Column classification ---
    numeric_column_ratio: float = 0.5
    leading_label_max_numeric_ratio: float = 0.2
    leading_label_min_body_header_ratio: float = 0.6

    # --- Label column reselection ---
    numeric_sequence_min_ratio: float = 0.8
    chartable_min_numeric_ratio: float = 0.5

    # --- Composition / deduplication ---
    header_separator: str = " > "
    label_separator: str = " - "
    generic_header_terms: list[str] = [
        "dollars",
        "units",
        "number",
        "count",
        "value",
        "values",
    ]

    # --- Grid limits ---
    max_colspan: int = 1000
    max_rowspan: int = 65534

    # --- HTML text extraction ---
    max_trailing_parenthetical_chars: int = 10
    max_trailing_parenthetical_words: int = 2
    offscreen_threshold_px: float = 1000.0
    min_table_rows: int = 2

    # --- Logging / PII safety ---
    log_cell_text: bool = False

    @classmethod
    def from_file(cls, path: str) -> TableParserConfig:
        """Load configuration from a YAML or JSON file.

        File format is detected by extension: ``.yaml`` / ``.yml`` for YAML,
        ``.json`` for JSON.  Any keys present in the file override the
        corresponding defaults; keys not present retain their defaults.

        Raises:
            FileNotFoundError: If *path* does not exist.
            ValueError: If the file extension is not recognized.
            ImportError: If a YAML file is provided but ``pyyaml`` is not
                installed.
        """
        file_path = pathlib.Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        suffix = file_path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            try:
                import yaml  # type: ignore[import-untyped]
            except ImportError as exc:
                raise ImportError(
                    "pyyaml is required to load YAML config files. "
                    "Install it with: pip install ingestkit-tables[yaml]"
                ) from exc
            with open(file_path) as fh:
                data = yaml.safe_load(fh)
        elif suffix == ".json":
            with open(file_path) as fh:
                data = json.load(fh)
        else:
            raise ValueError(
                f"Unsupported config file extension '{suffix}'. "
                "Use .yaml, .yml, or .json."
            )

        if data is None:
            data = {}

        return cls(**data)
