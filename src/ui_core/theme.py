# src/ui_core/theme.py
from __future__ import annotations

import tkinter as tk
from tkinter import ttk


# All colors live here so the console can be re-skinned in one place.
PALETTE = {
    # Surfaces (stone / deepslate)
    "bg":            "#16181A",
    "panel":         "#1E2124",
    "panel_2":       "#262A2E",
    "border":        "#34393E",

    # Text
    "text":          "#E4E6E8",
    "text_dim":      "#A9B0B6",
    "text_disabled": "#6E757B",

    # Inputs
    "input_bg":      "#121416",
    "caret":         "#E4E6E8",

    # Status
    "accent":        "#5E9C4A",  # grass
    "warn":          "#D9A441",  # gold
    "danger":        "#D2493F",  # redstone
    "ok":            "#6FBF5A",

    "select_bg":     "#2D3A2A",
    "select_fg":     "#F2F4F5",
}

FONTS = {
    "base": ("Segoe UI", 10),
    "mono": ("Consolas", 10),
    "heading": ("Segoe UI Semibold", 10),
    "status": ("Segoe UI", 16, "bold"),
}


class Theme:
    """
    Dark ttk theme for the reset console, built on 'clam' since it honors
    custom colors on every platform.
    """

    def __init__(self, root: tk.Tk):
        self.root = root
        self.style = ttk.Style(root)

    def apply(self) -> None:
        try:
            self.style.theme_use("clam")
        except tk.TclError:
            pass

        self.root.configure(background=PALETTE["bg"])
        self.root.option_add("*Font", FONTS["base"])

        self.style.configure(
            ".",
            background=PALETTE["panel"],
            foreground=PALETTE["text"],
            fieldbackground=PALETTE["input_bg"],
            bordercolor=PALETTE["border"],
            troughcolor=PALETTE["panel"],
            relief="flat",
        )
        self.style.configure("TLabelframe", background=PALETTE["panel"], bordercolor=PALETTE["border"], relief="groove")
        self.style.configure("TLabelframe.Label", background=PALETTE["panel"], foreground=PALETTE["text_dim"], font=FONTS["heading"])
        self.style.configure("Dim.TLabel", foreground=PALETTE["text_dim"])
        self.style.configure("Warning.TLabel", foreground=PALETTE["warn"], font=FONTS["heading"])

        self.style.configure("TButton", background=PALETTE["panel_2"], padding=(12, 7))
        self.style.map(
            "TButton",
            background=[("disabled", PALETTE["panel"]), ("active", PALETTE["border"])],
            foreground=[("disabled", PALETTE["text_disabled"])],
        )
        self.style.configure("Danger.TButton", background=PALETTE["danger"], foreground=PALETTE["select_fg"])
        self.style.map("Danger.TButton", background=[("disabled", PALETTE["panel"]), ("active", "#B23A31")])

        self.style.configure("TNotebook", background=PALETTE["bg"], borderwidth=0)
        self.style.configure("TNotebook.Tab", background=PALETTE["panel"], padding=(14, 6))
        self.style.map("TNotebook.Tab", background=[("selected", PALETTE["panel_2"])])

        # tk.Text (LogView) ignores ttk styles
        self.root.option_add("*Text.background", PALETTE["input_bg"])
        self.root.option_add("*Text.foreground", PALETTE["text"])
        self.root.option_add("*Text.insertBackground", PALETTE["caret"])
        self.root.option_add("*Text.selectBackground", PALETTE["select_bg"])
        self.root.option_add("*Text.font", FONTS["mono"])
