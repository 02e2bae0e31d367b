"""API — camada de borda HTTP/websocket.

Responsabilidades:
- Expor health e readiness
- Expor o stream websocket de eventos por sessão

NÃO PODE conter: regras de filtro, persistência de sessão, políticas de entrega.
"""
