# unit_converter/ui/app.py
import sys
import traceback
import tkinter as tk
from tkinter import messagebox
from typing import Dict

import customtkinter as ctk

# IMPORTAÇÕES LOCAIS
from unit_converter.config import (
    CURRENT_VERSION, PLACEHOLDER, TABLE_GEOMETRY, WINDOW_GEOMETRY, WINDOW_TITLE,
)
from unit_converter.core.formatting import to_exponential, to_precision
from unit_converter.core.units import UnitManager
from unit_converter.ui.state import ConverterState


class ToolTip:
    """
    Cria um tooltip (texto flutuante) para qualquer widget ctk/tk.
    """
    def __init__(self, widget, text):
        self.widget = widget
        self.text = text
        self.tip_window = None
        self.id = None

        self.widget.bind("<Enter>", self.schedule_show)
        self.widget.bind("<Leave>", self.hide_tip)
        self.widget.bind("<ButtonPress>", self.hide_tip)

    def schedule_show(self, event=None):
        self.unschedule()
        # Delay de 500ms para não piscar ao passar o mouse rápido
        self.id = self.widget.after(500, self.show_tip)

    def unschedule(self):
        id = self.id
        self.id = None
        if id:
            self.widget.after_cancel(id)

    def show_tip(self, event=None):
        x = self.widget.winfo_rootx() + 25
        y = self.widget.winfo_rooty() + 35

        self.tip_window = tw = tk.Toplevel(self.widget)
        tw.wm_overrideredirect(True)
        tw.wm_geometry(f"+{x}+{y}")

        label = tk.Label(tw, text=self.text, justify='left',
                         background="#1A1A1A", fg="#E0E0E0",
                         relief='solid', borderwidth=1,
                         font=("Arial", 9, "normal"))
        label.pack(ipadx=5, ipady=2)

    def hide_tip(self, event=None):
        self.unschedule()
        tw = self.tip_window
        self.tip_window = None
        if tw:
            tw.destroy()


class App(ctk.CTk):
    COLOR_ACTIVE_FG = "#F1F5F9"
    COLOR_ACTIVE_TEXT = "#0F172A"
    COLOR_IDLE_FG = "#343638"
    COLOR_IDLE_TEXT = "white"

    CATEGORY_COLUMNS = 6

    def __init__(self):
        super().__init__()

        self.converter = ConverterState.initial()
        self.category_buttons: Dict[str, ctk.CTkButton] = {}

        self.title(f"{WINDOW_TITLE} {CURRENT_VERSION}")
        self.geometry(WINDOW_GEOMETRY)
        self.protocol("WM_DELETE_WINDOW", self.on_closing)

        # Row 0: Menu Bar | Row 1: Conteúdo
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=0)
        self.grid_rowconfigure(1, weight=1)

        self._create_menubar()
        self._create_main_area()

        self._select_category_buttons()
        self._refresh_unit_menus()
        self.update_result()

        # Atalhos de Teclado
        self.bind('<Control-w>', lambda event: self.swap_units())
        self.bind('<Control-t>', lambda event: self.open_conversion_table())

    def _create_menubar(self):
        self.menubar_frame = ctk.CTkFrame(self, height=28, corner_radius=0, fg_color="#1e1e1e")
        self.menubar_frame.grid(row=0, column=0, sticky="ew")

        menu_btn_config = {
            "width": 50,
            "height": 28,
            "fg_color": "transparent",
            "hover_color": "#3a3a3a",
            "font": ctk.CTkFont(size=12),
            "anchor": "w"
        }

        self.btn_menu_tools = ctk.CTkButton(self.menubar_frame, text="Tools", command=self._post_tools_menu, **menu_btn_config)
        self.btn_menu_tools.pack(side="left", padx=2)

    def _post_tools_menu(self):
        """Exibe o menu nativo do Tkinter abaixo do botão Tools."""
        menu = tk.Menu(self, tearoff=0, bg="#2b2b2b", fg="white", activebackground="#404040", activeforeground="white", borderwidth=0)

        menu.add_command(label="    Conversion Table      (Ctrl+T)", command=self.open_conversion_table)
        menu.add_command(label="    Swap Units               (Ctrl+W)", command=self.swap_units)
        menu.add_separator()
        menu.add_command(label="    Exit", command=self.on_closing)

        try:
            x = self.btn_menu_tools.winfo_rootx()
            y = self.btn_menu_tools.winfo_rooty() + self.btn_menu_tools.winfo_height()
            menu.tk_popup(x, y)
        finally:
            menu.grab_release()

    def _create_main_area(self) -> None:
        self.main_frame = ctk.CTkFrame(self, fg_color="transparent")
        self.main_frame.grid(row=1, column=0, sticky="nsew", padx=20, pady=15)

        ctk.CTkLabel(self.main_frame, text=WINDOW_TITLE,
                     font=ctk.CTkFont(size=22, weight="bold")).pack(anchor="w")
        ctk.CTkLabel(self.main_frame, text="Category", text_color="gray").pack(anchor="w", pady=(8, 4))

        self._create_category_buttons()
        self._create_inputs()
        self._create_result_panel()
        self._create_footer()

    def _create_category_buttons(self):
        grid = ctk.CTkFrame(self.main_frame, fg_color="transparent")
        grid.pack(fill="x", pady=(0, 12))

        for idx, name in enumerate(UnitManager.list_categories()):
            btn = ctk.CTkButton(grid, text=name, height=26, corner_radius=13,
                                font=ctk.CTkFont(size=12),
                                command=lambda c=name: self.change_category(c))
            btn.grid(row=idx // self.CATEGORY_COLUMNS, column=idx % self.CATEGORY_COLUMNS, padx=3, pady=3, sticky="ew")
            self.category_buttons[name] = btn

    def _create_inputs(self):
        form = ctk.CTkFrame(self.main_frame, fg_color="transparent")
        form.pack(fill="x")
        form.grid_columnconfigure((0, 1, 2), weight=1)

        ctk.CTkLabel(form, text="Value", anchor="w").grid(row=0, column=0, sticky="w", padx=5)
        ctk.CTkLabel(form, text="From", anchor="w").grid(row=0, column=1, sticky="w", padx=5)
        ctk.CTkLabel(form, text="To", anchor="w").grid(row=0, column=2, sticky="w", padx=5)

        # Recalcula a cada tecla digitada
        self.value_var = ctk.StringVar(value=self.converter.raw_value)
        self.value_var.trace_add("write", lambda *args: self.on_value_change())
        self.entry_value = ctk.CTkEntry(form, textvariable=self.value_var)
        self.entry_value.grid(row=1, column=0, sticky="ew", padx=5)

        self.from_menu = ctk.CTkOptionMenu(form, values=[""], command=self.on_from_change)
        self.from_menu.grid(row=1, column=1, sticky="ew", padx=5)

        to_frame = ctk.CTkFrame(form, fg_color="transparent")
        to_frame.grid(row=1, column=2, sticky="ew", padx=5)
        to_frame.grid_columnconfigure(0, weight=1)

        self.to_menu = ctk.CTkOptionMenu(to_frame, values=[""], command=self.on_to_change)
        self.to_menu.grid(row=0, column=0, sticky="ew")

        self.btn_swap = ctk.CTkButton(to_frame, text="⇄", width=36, command=self.swap_units,
                                      fg_color="transparent", border_width=1, border_color="#666",
                                      hover_color="#444")
        self.btn_swap.grid(row=0, column=1, padx=(5, 0))
        ToolTip(self.btn_swap, "Swap Units (Ctrl+W)")

    def _create_result_panel(self):
        panel = ctk.CTkFrame(self.main_frame, corner_radius=8, fg_color="#2B2B2B")
        panel.pack(fill="x", pady=(18, 0))

        ctk.CTkLabel(panel, text="Result", text_color="gray", anchor="w").pack(fill="x", padx=15, pady=(10, 0))
        self.lbl_result = ctk.CTkLabel(panel, text=PLACEHOLDER, anchor="w",
                                       font=ctk.CTkFont(size=24, weight="bold"))
        self.lbl_result.pack(fill="x", padx=15)
        self.lbl_standard = ctk.CTkLabel(panel, text="", anchor="w", text_color="gray",
                                         font=ctk.CTkFont(size=11))
        self.lbl_standard.pack(fill="x", padx=15, pady=(0, 10))

    def _create_footer(self):
        footer = ctk.CTkFrame(self.main_frame, fg_color="transparent")
        footer.pack(fill="x", side="bottom", pady=(10, 0))
        ctk.CTkFrame(footer, height=1, fg_color="gray30").pack(fill="x", pady=(0, 6))
        ctk.CTkLabel(footer, text=f"Version {CURRENT_VERSION}", text_color="gray",
                     font=ctk.CTkFont(size=11)).pack()

    # --- SINCRONIZAÇÃO ESTADO -> WIDGETS ---

    def _select_category_buttons(self):
        for name, btn in self.category_buttons.items():
            if name == self.converter.category:
                btn.configure(fg_color=self.COLOR_ACTIVE_FG, text_color=self.COLOR_ACTIVE_TEXT)
            else:
                btn.configure(fg_color=self.COLOR_IDLE_FG, text_color=self.COLOR_IDLE_TEXT)

    def _refresh_unit_menus(self):
        """Menus mostram o rótulo completo; o estado guarda o nome curto."""
        category = UnitManager.get_category(self.converter.category)
        labels = [u.label for u in category.units.values()]

        self.from_menu.configure(values=labels)
        self.to_menu.configure(values=labels)
        self.from_menu.set(category.units[self.converter.from_unit].label)
        self.to_menu.set(category.units[self.converter.to_unit].label)

    def _report_error(self, title: str, error: Exception):
        """Falha inesperada: traceback no terminal e aviso ao usuário."""
        traceback.print_exc()
        messagebox.showerror(title, str(error))

    def update_result(self):
        try:
            result = self.converter.result()
        except Exception as e:
            self.lbl_result.configure(text=PLACEHOLDER)
            self.lbl_standard.configure(text="")
            self._report_error("Conversion Error", e)
            return
        self.lbl_result.configure(text=result.display)
        self.lbl_standard.configure(text=f"Standard form: {result.standard_form}" if result.ok else "")

    # --- CALLBACKS ---

    def change_category(self, choice: str):
        print(f"--- CATEGORIA: {choice} ---")
        try:
            self.converter.set_category(choice)
        except ValueError as e:
            messagebox.showerror("Input Error", str(e))
            return
        self._select_category_buttons()
        self._refresh_unit_menus()
        self.update_result()

    def _unit_name(self, label: str) -> str:
        unit = UnitManager.get_category(self.converter.category).find(label)
        return unit.name if unit else label

    def on_from_change(self, label: str):
        self.converter.from_unit = self._unit_name(label)
        self.update_result()

    def on_to_change(self, label: str):
        self.converter.to_unit = self._unit_name(label)
        self.update_result()

    def on_value_change(self):
        self.converter.raw_value = self.value_var.get()
        self.update_result()

    def swap_units(self):
        self.converter.swap_units()
        self._refresh_unit_menus()
        self.update_result()

    def open_conversion_table(self):
        """Janela com o valor atual expresso em todas as unidades da categoria."""
        try:
            value = UnitManager.parse_value(self.converter.raw_value)
            values = UnitManager.convert_all(self.converter.category, self.converter.from_unit, value)
        except ValueError as e:
            messagebox.showerror("Input Error", str(e))
            return
        except Exception as e:
            self._report_error("Conversion Table Error", e)
            return

        category = UnitManager.get_category(self.converter.category)
        source = category.units[self.converter.from_unit]
        print(f"Tabela de conversão: {category.name} ({len(values)} unidades)")

        win = ctk.CTkToplevel(self)
        win.title(f"{category.name}: {self.converter.raw_value.strip()} {source.label}")
        win.geometry(TABLE_GEOMETRY)
        win.attributes('-topmost', True)

        table = ctk.CTkScrollableFrame(win, fg_color="transparent")
        table.pack(fill="both", expand=True, padx=10, pady=10)

        headers = ["Unit", "Value", "Standard Form"]
        for i, h in enumerate(headers):
            ctk.CTkLabel(table, text=h, font=("Arial", 12, "bold")).grid(row=0, column=i, padx=10, pady=(0, 8), sticky="w")

        for r_idx, (name, val) in enumerate(values.items(), start=1):
            row = (category.units[name].label, to_precision(val), to_exponential(val))
            for c_idx, txt in enumerate(row):
                ctk.CTkLabel(table, text=txt).grid(row=r_idx, column=c_idx, padx=10, pady=2, sticky="w")

    def on_closing(self):
        self.quit()
        self.destroy()
        sys.exit(0)


def main():
    ctk.set_appearance_mode("dark")
    app = App()
    app.mainloop()


if __name__ == "__main__":
    main()
