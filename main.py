"""Punto de entrada del panel de usuarios."""

from __future__ import annotations

from panel_usuarios.main import main


if __name__ == "__main__":  # pragma: no cover - punto de entrada
    main()
