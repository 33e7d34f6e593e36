from .trade_summary import format_number, generate_trade_summary
from .risk_reward import calculate_percent_change, calculate_risk_reward, describe_levels, format_percent
from .export_formats import EXPORT_FORMATS, UnsupportedExportFormat, export_note
