"""Planning office backend: task chat, notifications and realtime updates."""
