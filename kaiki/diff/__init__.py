"""Pixelmatch-compatible image comparison, diff rendering and diff region detection."""