"""Capital-region subway lines as identified by the KRIC open-data API."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Line:
    """Subway line metadata."""

    code: str  # KRIC line code, e.g. "1002"
    name: str  # Korean name
    short_name: str  # Badge label shown next to station names
    color: str
    operator_code: str  # railOprIsttCd query parameter
    query_code: str  # lnCd query parameter


LINES: tuple[Line, ...] = (
    Line("1001", "1호선", "1", "#0052A4", "S1", "1"),
    Line("1002", "2호선", "2", "#00A84D", "S1", "2"),
    Line("1003", "3호선", "3", "#EF7C1C", "S1", "3"),
    Line("1004", "4호선", "4", "#00A5DE", "S1", "4"),
    Line("1005", "5호선", "5", "#996CAC", "S1", "5"),
    Line("1006", "6호선", "6", "#CD7E2F", "S1", "6"),
    Line("1007", "7호선", "7", "#727FB8", "S1", "7"),
    Line("1008", "8호선", "8", "#E6186A", "S1", "8"),
    Line("1009", "9호선", "9", "#BAB135", "S1", "9"),
    Line("1085", "수인분당선", "B", "#F5A200", "KR", "B1"),
    Line("1077", "신분당선", "S", "#D4003A", "NS", "D1"),
    Line("1063", "경의중앙선", "K", "#77BB4A", "KR", "K1"),
    Line("1067", "경춘선", "G", "#807DB8", "KR", "G1"),
    Line("1065", "공항철도", "A", "#009D3E", "AP", "A1"),
    Line("1099", "의정부경전철", "U", "#FDA600", "UI", "1099"),
    Line("1086", "에버라인", "E", "#6FB245", "WS", "1086"),
    Line("1087", "김포골드라인", "G", "#A17800", "GC", "G1"),
    Line("1090", "서해선", "W", "#81A914", "WS", "WE"),
    Line("1061", "인천 1호선", "I1", "#7CA8D5", "S1", "1061"),
    Line("1069", "인천 2호선", "I2", "#ED8B00", "S1", "1069"),
    Line("1092", "우이신설선", "Ui", "#B0CE18", "UI", "UI"),
    Line("1093", "신림선", "Si", "#6789CA", "SL", "SL"),
    Line("1081", "경강선", "Kg", "#003DA5", "KR", "K1"),
)

LINES_BY_CODE: dict[str, Line] = {line.code: line for line in LINES}
CAPITAL_REGION_LINE_CODES: tuple[str, ...] = tuple(line.code for line in LINES)

DEFAULT_OPERATOR_CODE = "S1"
DEFAULT_ROUTE_COLOR = "#888888"


def line_display_name(code: str) -> str:
    """Short badge name for a line code; unknown codes pass through."""
    line = LINES_BY_CODE.get(code)
    return line.short_name if line else code


def line_color(code: str) -> str:
    line = LINES_BY_CODE.get(code)
    return line.color if line else DEFAULT_ROUTE_COLOR


def line_query_params(code: str) -> dict[str, str]:
    """KRIC railOprIsttCd / lnCd pair for a line code."""
    line = LINES_BY_CODE.get(code)
    if line is None:
        return {"railOprIsttCd": DEFAULT_OPERATOR_CODE, "lnCd": code}
    return {"railOprIsttCd": line.operator_code, "lnCd": line.query_code}
