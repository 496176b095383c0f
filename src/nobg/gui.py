# ==========================================================
# nobg - Background Removal Desktop Shell
# Copyright (C) 2026 Saw it See had
# Licensed under the MIT License
# ==========================================================

import logging
import tkinter as tk
from tkinter import filedialog, messagebox
from typing import Optional

import customtkinter as ctk

try:
    from tkinterdnd2 import TkinterDnD, DND_FILES
    DND_AVAILABLE = True
except ImportError:
    DND_AVAILABLE = False

from . import config
from .bridge import Bridge, Dialogs
from .models import Canceled, Failure, ImageRecord, JobResult, ProgressEvent, Saved, Success
from .preview import render_preview
from .state import UIState

logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "Click to select an image\n\nor drop one here"

PHASE_LABELS = {
    config.PHASE_MODEL: "Loading model",
    config.PHASE_COMPUTE: "Removing background",
}


class TkDialogs(Dialogs):
    """Native file dialogs through tkinter.filedialog."""

    def __init__(self, parent=None):
        self.parent = parent

    def ask_open_path(self) -> Optional[str]:
        return filedialog.askopenfilename(
            parent=self.parent,
            title="Select an image",
            filetypes=config.OPEN_FILETYPES,
        )

    def ask_save_path(self, default_name: str) -> Optional[str]:
        return filedialog.asksaveasfilename(
            parent=self.parent,
            title="Save result as PNG",
            initialfile=default_name,
            defaultextension=".png",
            filetypes=config.SAVE_FILETYPES,
        )


class App(TkinterDnD.Tk if DND_AVAILABLE else ctk.CTk):
    def __init__(self, bridge: Bridge):
        super().__init__()

        self.title("nobg — Background Removal")
        self.geometry("900x600")
        self.minsize(700, 500)

        ctk.set_appearance_mode("Dark")
        ctk.set_default_color_theme("blue")
        self.configure(bg="#12121f")

        self.bridge   = bridge
        self.ui_state = UIState()
        self._preview_ref = None
        self._closing     = False

        self._build_ui()
        self._build_context_menu()

        if DND_AVAILABLE:
            self._setup_dnd()

        self.bridge.on_progress(lambda event: self._post(self._on_progress, event))
        self.protocol("WM_DELETE_WINDOW", self._on_close)

    def _build_ui(self):
        """Build the preview panel, progress row, controls and status bar."""
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        header = ctk.CTkFrame(self, fg_color="transparent")
        header.grid(row=0, column=0, sticky="ew", padx=20, pady=(16, 4))
        header.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            header, text="nobg",
            font=ctk.CTkFont(family="Arial", size=30, weight="bold"),
            text_color="#4fc3f7"
        ).grid(row=0, column=0)

        # Preview panel
        self.frame_preview = ctk.CTkFrame(self, corner_radius=12)
        self.frame_preview.grid(row=1, column=0, padx=14, pady=6, sticky="nsew")

        self.lbl_preview = ctk.CTkLabel(
            self.frame_preview, text=PLACEHOLDER_TEXT,
            font=ctk.CTkFont(size=13), text_color="gray", cursor="hand2"
        )
        self.lbl_preview.pack(expand=True, fill="both", padx=8, pady=8)
        self.lbl_preview.bind("<Button-1>", lambda e: self.open_image())

        # Progress row, shown only while a job runs
        self.frame_progress = ctk.CTkFrame(self, fg_color="transparent")
        self.frame_progress.grid_columnconfigure(0, weight=1)
        self.progress_bar = ctk.CTkProgressBar(self.frame_progress, mode="determinate")
        self.progress_bar.grid(row=0, column=0, sticky="ew", padx=(4, 8))
        self.progress_bar.set(0)
        self.lbl_progress = ctk.CTkLabel(self.frame_progress, text="0%", width=200, anchor="w")
        self.lbl_progress.grid(row=0, column=1)

        # Controls
        ctrl = ctk.CTkFrame(self, fg_color="transparent")
        ctrl.grid(row=3, column=0, sticky="ew", padx=14, pady=(2, 2))
        for i in range(3):
            ctrl.grid_columnconfigure(i, weight=1)

        self.btn_open = ctk.CTkButton(
            ctrl, text="Select Image", command=self.open_image,
            height=40, font=ctk.CTkFont(size=13, weight="bold"), corner_radius=10
        )
        self.btn_open.grid(row=0, column=0, padx=8, pady=6, sticky="ew")

        self.btn_save = ctk.CTkButton(
            ctrl, text="Save as PNG", command=self.save_image,
            height=40, font=ctk.CTkFont(size=13, weight="bold"), corner_radius=10,
            state="disabled", fg_color="#2e7d32", hover_color="#388e3c"
        )
        self.btn_save.grid(row=0, column=1, padx=8, pady=6, sticky="ew")

        self.btn_clear = ctk.CTkButton(
            ctrl, text="Clear", command=self.clear_all,
            height=40, font=ctk.CTkFont(size=13, weight="bold"), corner_radius=10,
            state="disabled", fg_color="#c62828", hover_color="#d32f2f"
        )
        self.btn_clear.grid(row=0, column=2, padx=8, pady=6, sticky="ew")

        self.lbl_info = ctk.CTkLabel(
            self, text="Select or drop an image to begin.",
            font=ctk.CTkFont(size=12), text_color="gray", wraplength=800
        )
        self.lbl_info.grid(row=4, column=0, pady=(0, 8))

    def _build_context_menu(self):
        """Right-click menu on the preview: save or clear."""
        self.menu = tk.Menu(self, tearoff=0)
        self.menu.add_command(label="Save as PNG…", command=self.save_image)
        self.menu.add_separator()
        self.menu.add_command(label="Clear", command=self.clear_all)
        self.lbl_preview.bind("<Button-3>", self._show_context_menu)

    def _show_context_menu(self, event):
        if self.ui_state.busy:
            return
        self.menu.entryconfigure(0, state="normal" if self.ui_state.can_save else "disabled")
        self.menu.entryconfigure(2, state="normal" if self.ui_state.current_image else "disabled")
        try:
            self.menu.tk_popup(event.x_root, event.y_root)
        finally:
            self.menu.grab_release()

    def _setup_dnd(self):
        """Register drag-and-drop targets."""
        for widget in (self, self.frame_preview):
            widget.drop_target_register(DND_FILES)
            widget.dnd_bind("<<Drop>>", self._on_drop)

    def _post(self, fn, *args):
        """Schedule ``fn`` on the Tk thread; called from the relay thread."""
        if not self._closing:
            self.after(0, fn, *args)

    # Selection

    def _on_drop(self, event):
        """Handle a file drop event."""
        if self.ui_state.busy:
            return
        paths = self.tk.splitlist(event.data)
        if paths:
            self._handle_selection(self.bridge.select_image(paths[0]))

    def open_image(self):
        """Open the file picker and load the chosen image."""
        if self.ui_state.busy:
            return
        self._handle_selection(self.bridge.select_image())

    def _handle_selection(self, result):
        if isinstance(result, Canceled):
            return
        if isinstance(result, Failure):
            self._alert(result.reason)
            return

        record: ImageRecord = result
        thumb = render_preview(record.encoded_bytes, config.PREVIEW_SIZE, checker=False)
        if isinstance(thumb, Failure):
            self._set_status(f"ERROR: {thumb.reason}")
            self._alert(thumb.reason)
            return

        self.ui_state.load(record)
        self._show_thumbnail(thumb)
        self._set_status(f"Loaded: {record.display_name}  ({record.byte_size / 1024:.0f} KiB)")
        self._start_processing()

    # Processing

    def _start_processing(self):
        """Hand the current image to the bridge; the UI stays responsive."""
        if not self.ui_state.can_start:
            return
        self.ui_state.start()
        self._refresh_controls()
        self.progress_bar.set(0)
        self.lbl_progress.configure(text="0%")
        self.frame_progress.grid(row=2, column=0, sticky="ew", padx=20, pady=(0, 4))
        self._set_status("Processing… the first run downloads the model.")

        future = self.bridge.remove_background(self.ui_state.current_image.source_path)
        future.add_done_callback(lambda f: self._post(self._on_job_done, f.result()))

    def _on_progress(self, event: ProgressEvent):
        if not self.ui_state.apply_progress(event):
            return
        label = PHASE_LABELS.get(event.phase_key, event.phase_key)
        self.progress_bar.set(event.percent_complete / 100)
        self.lbl_progress.configure(text=f"{label}: {event.percent_complete}%")

    def _on_job_done(self, result: JobResult):
        """Show the result, or report the failure and restore the controls."""
        self.ui_state.finish(result)
        self.frame_progress.grid_remove()
        self._refresh_controls()

        if isinstance(result, Success):
            thumb = render_preview(result.encoded_image_bytes, config.PREVIEW_SIZE)
            if isinstance(thumb, Failure):
                self._set_status(f"Done. {thumb.reason}. Save as PNG to export.")
                self._alert(thumb.reason)
            else:
                self._show_thumbnail(thumb)
                self._set_status("Done! Save as PNG to export, or right-click the preview.")
        else:
            self._set_status(f"ERROR: {result.reason}")
            self._alert(f"Error: {result.reason}")

    # Save / clear

    def save_image(self):
        """Save the processed image through the native save dialog."""
        if not self.ui_state.can_save:
            return
        result = self.bridge.save_image(
            self.ui_state.processed_image,
            self.ui_state.current_image.display_name,
        )
        if isinstance(result, Saved):
            self._set_status(f"Saved to: {result.path}")
        elif isinstance(result, Failure):
            self._alert(f"Save error: {result.reason}")

    def clear_all(self):
        """Reset the application state, clearing images and results."""
        if self.ui_state.busy:
            return
        self.ui_state.clear()
        self._preview_ref = None
        self.lbl_preview.configure(image=None, text=PLACEHOLDER_TEXT)
        if hasattr(self.lbl_preview, "_label"):
            self.lbl_preview._label.configure(image="")
        self._refresh_controls()
        self._set_status("Select or drop an image to begin.")

    # Helpers

    def _show_thumbnail(self, thumb):
        photo = ctk.CTkImage(light_image=thumb, dark_image=thumb, size=thumb.size)
        self._preview_ref = photo
        self.lbl_preview.configure(image=photo, text="")

    def _refresh_controls(self):
        busy = self.ui_state.busy
        self.btn_open.configure(state="disabled" if busy else "normal")
        self.btn_save.configure(state="normal" if self.ui_state.can_save else "disabled")
        self.btn_clear.configure(
            state="normal" if self.ui_state.current_image and not busy else "disabled"
        )

    def _alert(self, message: str):
        messagebox.showerror("nobg", message, parent=self)

    def _set_status(self, text: str):
        """Update the bottom status bar label."""
        self.lbl_info.configure(text=text)

    def _on_close(self):
        self._closing = True
        self.bridge.close()
        self.destroy()
