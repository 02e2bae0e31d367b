"""App — orquestração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: eventos, decisões e envelope
- use_cases/: pipeline de um evento de runtime
- services/: filtro, dispatcher, arquivamento, etiquetas, mídia
- infra/: implementações concretas de IO (stores, http, websocket)
- protocols/: contratos/interfaces
- sessions/: tokens de sessão e registro
- observability/: correlation_id e métricas

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
