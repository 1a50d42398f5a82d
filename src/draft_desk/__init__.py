"""Draft Desk - LoL draft assistant backend."""
