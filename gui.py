"""
GUI for RideCalc
Tkinter numeric fields with a calculator popup for each one
"""
import json
import logging
import tkinter as tk
from tkinter import ttk

import config
from actions import Action
from session import SessionState

logger = logging.getLogger(__name__)

# Keypad rows: (label, key, kind)
KEYPAD = [
    [("7", "7", "normal"), ("8", "8", "normal"), ("9", "9", "normal"), ("÷", "/", "operator"), ("(", "(", "special")],
    [("4", "4", "normal"), ("5", "5", "normal"), ("6", "6", "normal"), ("×", "*", "operator"), (")", ")", "special")],
    [("1", "1", "normal"), ("2", "2", "normal"), ("3", "3", "normal"), ("−", "-", "operator"), ("%", "%", "special")],
    [("0", "0", "normal"), (".", ".", "normal"), ("=", "=", "equals"), ("+", "+", "operator"), ("±", "±", "special")],
]
MEMORY_KEYS = ["M+", "M-", "MR", "MC"]


def neu_btn(parent, T, text, command=None, kind="normal", **kw):
    """Create a neumorphic styled flat button."""
    if kind == "equals":
        bg, fg, abg = T["equals_bg"], T["equals_fg"], T["success"]
    elif kind == "operator":
        bg, fg, abg = T["btn_bg"], T["operator_fg"], T["bg_dark"]
    elif kind == "special":
        bg, fg, abg = T["btn_bg"], T["special_fg"], T["bg_dark"]
    elif kind == "memory":
        bg, fg, abg = T["bg_dark"], T["memory_fg"], T["shadow_dark"]
    elif kind == "danger":
        bg, fg, abg = T["danger"], "#FFFFFF", T["bg_dark"]
    else:
        bg, fg, abg = T["btn_bg"], T["btn_fg"], T["bg_dark"]
    return tk.Button(
        parent, text=text, command=command,
        font=kw.pop("font", config.BUTTON_FONT),
        bg=bg, fg=fg,
        activebackground=abg, activeforeground=fg,
        relief=tk.FLAT, bd=0, cursor="hand2",
        highlightthickness=1,
        highlightbackground=T["shadow_dark"],
        highlightcolor=T["shadow_lite"],
        **kw
    )


class CalculatorPopup(tk.Toplevel):
    """Calculator window editing one field; closes on Done or Cancel."""

    def __init__(self, master, session, title, T, on_close=None):
        super().__init__(master)
        self.session = session
        self.T = T
        self.on_close = on_close
        self.title(title)
        self.geometry(f"{config.POPUP_WIDTH}x{config.POPUP_HEIGHT}")
        self.configure(bg=T["bg"])
        self.transient(master)
        self.protocol("WM_DELETE_WINDOW", self.cancel)

        self.create_widgets()
        self.session.add_listener(self._feedback)
        self.bind("<Key>", self.on_key_press)
        self.refresh()
        self.grab_set()
        self.focus_set()

    def create_widgets(self):
        T = self.T

        # Tape (oldest first, scrolled to newest)
        tape_frame = tk.Frame(self, bg=T["bg"])
        tape_frame.pack(fill=tk.X, padx=8, pady=(8, 4))
        self.tape_list = tk.Listbox(
            tape_frame, height=4, font=config.TAPE_FONT,
            bg=T["listbox_bg"], fg=T["listbox_fg"],
            relief=tk.FLAT, bd=0, highlightthickness=0, justify=tk.RIGHT,
            activestyle="none"
        )
        tape_sb = ttk.Scrollbar(tape_frame, orient=tk.VERTICAL, command=self.tape_list.yview)
        self.tape_list.configure(yscrollcommand=tape_sb.set)
        self.tape_list.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        tape_sb.pack(side=tk.RIGHT, fill=tk.Y)

        # Display
        self.display = tk.Label(
            self, text="0", font=config.DISPLAY_FONT,
            bg=T["display_bg"], fg=T["display_fg"],
            anchor=tk.E, padx=12, pady=8
        )
        self.display.pack(fill=tk.X, padx=8, pady=4)

        # Memory and action bar
        bar = tk.Frame(self, bg=T["bg"])
        bar.pack(fill=tk.X, padx=8, pady=4)
        for key in MEMORY_KEYS:
            neu_btn(bar, T, key, command=lambda k=key: self.press(k), kind="memory",
                    width=3).pack(side=tk.LEFT, padx=2)
        neu_btn(bar, T, "AC", command=lambda: self.press("AC"), kind="danger",
                width=3).pack(side=tk.RIGHT, padx=2)
        neu_btn(bar, T, "⌫", command=lambda: self.press("⌫"), kind="memory",
                width=3).pack(side=tk.RIGHT, padx=2)

        # Keypad
        grid = tk.Frame(self, bg=T["bg"])
        grid.pack(fill=tk.BOTH, expand=True, padx=8, pady=4)
        for r, row in enumerate(KEYPAD):
            grid.rowconfigure(r, weight=1)
            for c, (label, key, kind) in enumerate(row):
                grid.columnconfigure(c, weight=1)
                neu_btn(grid, T, label, command=lambda k=key: self.press(k), kind=kind,
                        font=(config.BUTTON_FONT[0], 16)).grid(row=r, column=c, sticky="nsew", padx=3, pady=3)

        # Cancel / Done
        footer = tk.Frame(self, bg=T["bg"])
        footer.pack(fill=tk.X, padx=8, pady=(4, 8))
        neu_btn(footer, T, "Cancel", command=self.cancel).pack(side=tk.LEFT)
        neu_btn(footer, T, "Done", command=self.done, kind="equals").pack(side=tk.RIGHT)

    def press(self, key):
        self.session.press(key)
        self.refresh()

    def on_key_press(self, event):
        """Map keyboard input to calculator keys"""
        key = event.char if event.char and event.char.isprintable() else event.keysym
        try:
            action = Action.from_key(key)
        except ValueError:
            return
        self.session.dispatch(action)
        self.refresh()

    def refresh(self):
        self.display.config(text=self.session.display)
        self.tape_list.delete(0, tk.END)
        for line in self.session.tape.format_calculation_history(self.session.calculator.formatter):
            self.tape_list.insert(tk.END, line)
        self.tape_list.see(tk.END)

    def _feedback(self, action):
        """Brief flash of the display in place of a haptic tap"""
        self.display.config(bg=self.T["bg_dark"])
        self.after(80, lambda: self.display.config(bg=self.T["display_bg"]) if self.display.winfo_exists() else None)

    def done(self):
        self.session.done()
        self._close()

    def cancel(self):
        if self.session.state == SessionState.OPEN:
            self.session.cancel()
        self._close()

    def _close(self):
        self.grab_release()
        self.destroy()
        if self.on_close:
            self.on_close(self.session)


class RideCalcGUI:
    def __init__(self, root, session_manager):
        self.root = root
        self.root.title(config.APP_NAME)
        self.root.geometry(f"{config.WINDOW_WIDTH}x{config.WINDOW_HEIGHT}")

        settings = self._load_settings()
        self.dark_mode: bool = settings.get("dark_mode", False)
        self.T: dict = config.get_theme(self.dark_mode)
        self.root.configure(bg=self.T["bg"])

        # Same field objects the API edits
        self.manager = session_manager
        self.entry_vars = {}
        self.entries = {}
        self.create_widgets()
        self.root.after(config.FIELD_SYNC_MS, self._sync_fields)

    # ── Settings persistence ─────────────────────────────────────────────
    def _load_settings(self):
        try:
            with open(config.SETTINGS_FILE, "r") as f:
                return json.load(f)
        except (OSError, ValueError):
            return {}

    def _save_settings(self, data):
        existing = self._load_settings()
        existing.update(data)
        with open(config.SETTINGS_FILE, "w") as f:
            json.dump(existing, f, indent=2)

    def _toggle_dark_mode(self):
        """Persist dark_mode setting and rebuild the window."""
        self.dark_mode = not self.dark_mode
        self._save_settings({"dark_mode": self.dark_mode})
        self.T = config.get_theme(self.dark_mode)
        self.root.configure(bg=self.T["bg"])
        for w in self.root.winfo_children():
            w.destroy()
        self.create_widgets()

    # ── Widgets ─────────────────────────────────────────────────────────
    def create_widgets(self):
        T = self.T
        top = tk.Frame(self.root, bg=T["hdr_bg"], height=50)
        top.pack(fill=tk.X, padx=2, pady=2)
        tk.Label(top, text="RideCalc", font=(config.BUTTON_FONT[0], 16, "bold"),
                 bg=T["hdr_bg"], fg=T["accent"]).pack(side=tk.LEFT, padx=8, pady=6)
        neu_btn(top, T, "☾" if not self.dark_mode else "☀",
                command=self._toggle_dark_mode).pack(side=tk.RIGHT, padx=6)

        body = tk.Frame(self.root, bg=T["bg"])
        body.pack(fill=tk.BOTH, expand=True, padx=8, pady=8)
        body.columnconfigure(1, weight=1)

        for row, field in enumerate(self.manager.fields.values()):
            label = self.manager.labels[field.name]
            tk.Label(body, text=label, font=config.LABEL_FONT, bg=T["bg"], fg=T["text"],
                     anchor=tk.W).grid(row=row, column=0, sticky="w", pady=4)
            var = tk.StringVar(value=field.text)
            self.entry_vars[field.name] = var
            entry = tk.Entry(body, textvariable=var, justify=tk.RIGHT, font=config.LABEL_FONT,
                             bg=T["entry_bg"], fg=T["entry_fg"], relief=tk.FLAT,
                             insertbackground=T["entry_fg"])
            entry.grid(row=row, column=1, sticky="ew", padx=6, pady=4)
            self.entries[field.name] = entry
            entry.bind("<Return>", lambda e, f=field: self.submit_field(f))
            entry.bind("<FocusOut>", lambda e, f=field: self.submit_field(f))
            neu_btn(body, T, "Calc", command=lambda f=field, l=label: self.open_calculator(f, l),
                    kind="operator").grid(row=row, column=2, pady=4)

    def submit_field(self, field):
        """Apply typed text (which may be an expression) to a field"""
        var = self.entry_vars[field.name]
        accepted, field = self.manager.submit_field_text(field.name, var.get())
        if not accepted:
            self._show_toast(f"Could not use '{var.get()}'", kind="error")
        var.set(field.text)

    def _sync_fields(self):
        """Pick up values changed through the API, except in the entry being typed in"""
        focused = self.root.focus_get()
        for name, var in self.entry_vars.items():
            if self.entries[name] is focused:
                continue
            text = self.manager.get_field(name).text
            if var.get() != text:
                var.set(text)
        self.root.after(config.FIELD_SYNC_MS, self._sync_fields)

    def open_calculator(self, field, label):
        session = field.open_calculator(
            sink=lambda value, name=field.name: self.manager.set_field_value(name, value))
        CalculatorPopup(self.root, session, label, self.T,
                        on_close=lambda s, f=field: self._calculator_closed(s, f))

    def _calculator_closed(self, session, field):
        if session.state == SessionState.COMMITTED:
            self.entry_vars[field.name].set(field.text)
            self._show_toast(f"Saved {field.text or '0'}")

    def _show_toast(self, msg, kind="success", duration=2500):
        """Show an inline toast banner at the top of the window."""
        T = self.T
        bg = T["success"] if kind == "success" else T["danger"]
        icon = "✓" if kind == "success" else "✗"
        toast = tk.Frame(self.root, bg=bg)
        toast.place(relx=0.05, y=55, relwidth=0.9, height=36)
        toast.lift()
        tk.Label(toast, text=f"  {icon}  {msg}", font=(config.BUTTON_FONT[0], 9, "bold"),
                 bg=bg, fg="#FFFFFF", anchor="w").pack(side=tk.LEFT, fill=tk.X, expand=True)
        self.root.after(duration, lambda: toast.destroy() if toast.winfo_exists() else None)
