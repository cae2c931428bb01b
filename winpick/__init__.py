"""winpick - fuzzy window switcher for Hyprland (cli client & daemon)."""
