import io
import logging
import warnings

import pandas as pd
from pandas import isna

logger = logging.getLogger(__name__)

CONTENT_COLUMN = "Content"


class ParseError(ValueError):
    pass


def cell_text(value) -> str:
    if value is None:
        return ""
    try:
        if isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value)


class TabularContent:
    """Ordered headers plus string rows, backed by an object-typed DataFrame."""

    def __init__(self, headers, df: pd.DataFrame | None = None):
        self.headers: list[str] = [str(h) for h in headers]
        if df is None:
            df = pd.DataFrame(columns=self.headers, dtype=object)
        self.df = df

    @classmethod
    def empty(cls) -> "TabularContent":
        return cls([])

    @classmethod
    def from_rows(cls, headers, rows) -> "TabularContent":
        headers = [str(h) for h in headers]
        records = [[cell_text(row.get(h)) for h in headers] for row in rows]
        df = pd.DataFrame(records, columns=headers, dtype=object)
        if not records:
            df = pd.DataFrame(columns=headers, dtype=object)
        return cls(headers, df.reset_index(drop=True))

    @property
    def rows(self) -> list[dict[str, str]]:
        return [
            {h: cell_text(v) for h, v in zip(self.headers, values)}
            for values in self.df.itertuples(index=False, name=None)
        ]

    def __len__(self):
        return len(self.df)

    def copy(self) -> "TabularContent":
        return TabularContent(self.headers, self.df.copy(deep=True))

    def get_cell(self, row: int, column: str) -> str:
        self._check_cell(row, column)
        return cell_text(self.df.at[row, column])

    def set_cell(self, row: int, column: str, value) -> None:
        self._check_cell(row, column)
        self.df.at[row, column] = cell_text(value)

    def _check_cell(self, row: int, column: str) -> None:
        if not isinstance(row, int) or row < 0 or row >= len(self.df):
            raise IndexError(f"Row {row} out of range (0-{len(self.df) - 1})")
        if column not in self.headers:
            raise KeyError(f"Unknown column '{column}'")

    def __eq__(self, other):
        if not isinstance(other, TabularContent):
            return NotImplemented
        return self.headers == other.headers and self.rows == other.rows

    def __repr__(self):
        return f"TabularContent(headers={self.headers!r}, rows={len(self.df)})"


def serialize_field(value) -> str:
    text = cell_text(value)
    if "," in text or '"' in text or "\n" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def serialize_csv(headers, rows) -> str:
    lines = [",".join(serialize_field(h) for h in headers)]
    for row in rows:
        lines.append(",".join(serialize_field(row.get(h)) for h in headers))
    return "\n".join(lines)


def _keep_bad_line(fields):
    # extra trailing fields are dropped by the parser
    return fields


def parse_csv(text: str) -> TabularContent:
    if not text or not text.strip():
        return TabularContent.empty()
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            raw = pd.read_csv(
                io.StringIO(text),
                header=None,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=False,
                engine="python",
                on_bad_lines=_keep_bad_line,
            )
    except pd.errors.EmptyDataError:
        return TabularContent.empty()
    except pd.errors.ParserError as e:
        raise ParseError(str(e)) from e

    raw = raw.fillna("")
    fields = [cell_text(v) for v in raw.iloc[0]] if len(raw) else []
    rows = [
        dict(zip(fields, (cell_text(v) for v in values)))
        for values in raw.iloc[1:].itertuples(index=False, name=None)
    ]
    headers = list(rows[0].keys()) if rows else fields
    logger.debug("Parsed CSV: %d columns, %d rows", len(headers), len(rows))
    return TabularContent.from_rows(headers, rows)


class FileTypeHandler:
    def __init__(self, name: str):
        self.name = name or ""
        self.is_csv = self.name.lower().endswith(".csv")

    def parse(self, text: str) -> TabularContent:
        text = "" if text is None else text
        if not self.is_csv:
            return TabularContent.from_rows([CONTENT_COLUMN], [{CONTENT_COLUMN: text}])
        return parse_csv(text)

    def serialize(self, content: TabularContent) -> str:
        return serialize_csv(content.headers, content.rows)
