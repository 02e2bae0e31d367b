"""Stream websocket de eventos por sessão."""
