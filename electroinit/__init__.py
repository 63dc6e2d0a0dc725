"""ElectroInit -- Electron + React + Vite project scaffold generator."""

__version__ = "0.1.0"
