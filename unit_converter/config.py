# unit_converter/config.py

CURRENT_VERSION = "1.5.1"

# Estado inicial da janela
DEFAULT_CATEGORY = "Force"
DEFAULT_VALUE = "1"

# Texto exibido quando não há resultado válido
PLACEHOLDER = "—"

# Precisão de exibição
SIGNIFICANT_DIGITS = 9     # Categorias lineares (toPrecision)
FIXED_DECIMALS = 6         # Temperatura (toFixed)
STANDARD_FORM_DIGITS = 3   # Linha "Standard form"

WINDOW_TITLE = "Unit Converter"
WINDOW_GEOMETRY = "820x520"
TABLE_GEOMETRY = "460x520"
