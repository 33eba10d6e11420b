"""Core module - pipeline concurrente del bridge.

Estructura:
- domain/      → Modelos, contratos y errores
- pipeline/    → Fetch loop, publish relay, transport loop, supervisor
- transport/   → Conexión MQTT (paho) y transporte en memoria
- monitoring/  → Contadores del pipeline
"""
