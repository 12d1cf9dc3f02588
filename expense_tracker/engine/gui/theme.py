"""Carbon-inspired stylesheet for the expense window."""

from __future__ import annotations

from collections.abc import Mapping

DEFAULT_TOKENS: dict[str, str] = {
    "color.primary": "#0f62fe",
    "color.danger": "#da1e28",
    "color.surface": "#f4f4f4",
    "color.card": "white",
    "color.text": "#161616",
    "color.muted": "#c6c6c6",
    "color.border": "#d0d0d0",
    "font.family": '"Segoe UI", "IBM Plex Sans", sans-serif',
}


def build_stylesheet(tokens: Mapping[str, str] | None = None) -> str:
    """Return a QSS stylesheet inspired by Carbon's g10 theme."""

    t = {**DEFAULT_TOKENS, **(tokens or {})}
    return f"""
    QWidget {{
        background: {t["color.surface"]};
        color: {t["color.text"]};
        font-family: {t["font.family"]};
    }}

    QTableWidget {{
        background: {t["color.card"]};
        border: 1px solid {t["color.border"]};
        border-radius: 8px;
        gridline-color: #e0e0e0;
        selection-background-color: {t["color.primary"]};
        selection-color: white;
        alternate-background-color: #f2f2f2;
    }}

    QHeaderView::section {{
        background: #e5e5e5;
        font-weight: 600;
        padding: 8px;
        border: none;
    }}

    QGroupBox {{
        background: {t["color.card"]};
        border: 1px solid {t["color.border"]};
        border-radius: 12px;
        margin-top: 16px;
        padding: 16px;
        font-weight: 600;
    }}

    QGroupBox:title {{
        subcontrol-origin: margin;
        subcontrol-position: top left;
        padding: 0 8px;
        color: {t["color.primary"]};
    }}

    QPushButton {{
        background: {t["color.primary"]};
        color: white;
        padding: 10px 18px;
        border-radius: 8px;
        font-weight: 600;
    }}

    QPushButton#DangerButton {{
        background: {t["color.danger"]};
    }}

    QPushButton#SecondaryButton {{
        background: #8d8d8d;
    }}

    QLabel#TotalLabel {{
        font-size: 18pt;
        font-weight: 600;
    }}

    QLabel#Header {{
        background: {t["color.text"]};
        color: white;
        font-size: 20pt;
        font-weight: 600;
        padding: 16px 24px;
    }}
    """


__all__ = ["DEFAULT_TOKENS", "build_stylesheet"]
