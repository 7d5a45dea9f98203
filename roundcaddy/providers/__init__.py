from .errors import ProviderError
from .supabase import SupabaseClient, get_supabase_client
from .weather import WeatherReport, get_weather

__all__ = [
    "ProviderError",
    "SupabaseClient",
    "WeatherReport",
    "get_supabase_client",
    "get_weather",
]
