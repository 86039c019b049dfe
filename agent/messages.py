"""
agent/messages.py

User-facing literals returned by the assistant.
"""

NO_ROUTE_MESSAGE = "⚠️ No tienes una ruta asignada. Por favor contacta a tu supervisor."
NO_DATA_MESSAGE = "⚠️ No hay información cargada para la ruta {route_code}."
NO_MATCHES_MESSAGE = "🔍 No encontré clientes que coincidan con tu búsqueda."
NO_MORE_ITEMS_MESSAGE = "✅ No hay más clientes para mostrar."
MORE_ITEMS_HINT = "🔽 *Escribe 'ver más' para los siguientes.*"
APOLOGY_MESSAGE = "❌ Tuve un problema procesando tu consulta. Intenta de nuevo más tarde."
REPORT_ACK_MESSAGE = '📝 Reporte guardado: "{content}". ¡Gracias!'
EMPTY_REPORT_CONTENT = "Reporte vacío"
