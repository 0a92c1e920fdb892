# ui/render.py
import html as html_escape

from firebase_rest.core.codec import format_timestamp
from firebase_rest.core.values import ValueKind


def format_value(value):
    """Short display text for one scalar Value."""
    kind, payload = value.kind, value.payload

    if kind is ValueKind.NULL:
        return "null"
    if kind is ValueKind.BOOLEAN:
        return "true" if payload else "false"
    if kind is ValueKind.TIMESTAMP:
        return format_timestamp(payload)
    if kind is ValueKind.BYTES:
        return f"<{len(payload)} bytes>"
    if kind is ValueKind.GEO_POINT:
        return f"({payload.latitude}, {payload.longitude})"
    if kind is ValueKind.ARRAY:
        return "[]"
    if kind is ValueKind.MAP:
        return "{}"
    return str(payload)


def value_rows(key, value):
    """Flatten one field into (key, text) rows; maps dotted, arrays indexed."""
    if value.kind is ValueKind.MAP and value.payload:
        rows = []
        for k, v in value.payload.items():
            rows.extend(value_rows(f"{key}.{k}", v))
        return rows

    if value.kind is ValueKind.ARRAY and value.payload:
        rows = []
        for i, v in enumerate(value.payload):
            rows.extend(value_rows(f"{key}[{i}]", v))
        return rows

    return [(key, format_value(value))]


def document_rows(document):
    rows = []
    for key in sorted(document.fields or {}):
        rows.extend(value_rows(key, document.fields[key]))
    return rows


_TABLE_STYLE = (
    "table{width:100%;border-collapse:collapse;font:14px sans-serif}"
    "th{text-align:left;border-bottom:2px solid #ccc;padding:4px 8px}"
    "td{border-bottom:1px solid #eee;padding:4px 8px;vertical-align:top}"
    "td.path{font-family:monospace;color:#555;white-space:nowrap}"
)


def _cell(text, css=None):
    attr = f' class="{css}"' if css else ""
    body = html_escape.escape(text).replace("\n", "<br>")
    return f"<td{attr}>{body}</td>"


def render_fields_table(rows):
    """One line per flattened field path."""
    lines = [f"<tr>{_cell(path, 'path')}{_cell(text)}</tr>" for path, text in rows]
    return (
        f"<style>{_TABLE_STYLE}</style>"
        "<table><thead><tr><th>Field</th><th>Value</th></tr></thead>"
        f"<tbody>{''.join(lines)}</tbody></table>"
    )
