# services/pricing_service.py

from decimal import Decimal, ROUND_HALF_UP

from models.station import StationType

CENT = Decimal('0.01')

# MAD per hour, used when business_settings has no value for a column
DEFAULT_PRICING_BY_TYPE = {
    StationType.XBOX: {'price_1_mad': 20.0, 'price_4_mad': None},
    StationType.STANDARD_PS5: {'price_1_mad': 40.0, 'price_4_mad': 55.0},
    StationType.PREMIUM_PS5: {'price_1_mad': 50.0, 'price_4_mad': 70.0},
}


def _to_decimal(value):
    return Decimal(str(value or 0))


def round_money(value):
    """Round to cents, half away from zero (ROUND_HALF_UP in decimal is symmetric)."""
    return float(_to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))


class PricingService:

    @staticmethod
    def compute_cost(rate_per_hour, duration_minutes):
        """round((duration / 60) * rate * 100) / 100, computed exactly."""
        raw = _to_decimal(duration_minutes) * _to_decimal(rate_per_hour) / Decimal(60)
        return float(raw.quantize(CENT, rounding=ROUND_HALF_UP))

    @staticmethod
    def select_rate(station, use_group_rate=False):
        """
        Group (4-person) rate when asked for and configured; the solo rate
        otherwise. An unconfigured group rate is not an error.
        """
        if use_group_rate and station.price_group is not None:
            return float(station.price_group)
        return float(station.price_solo or 0)

    @staticmethod
    def compute_total(base_cost, extra_items_cost=0):
        base = _to_decimal(round_money(base_cost))
        extras = _to_decimal(round_money(extra_items_cost))
        return round_money(base + extras)

    @staticmethod
    def pricing_by_type(settings):
        """Per-type hourly rates from the settings row, falling back to the defaults."""
        pricing = {}
        for station_type, defaults in DEFAULT_PRICING_BY_TYPE.items():
            solo = getattr(settings, f'{station_type}_price_1', None) if settings else None
            group = getattr(settings, f'{station_type}_price_4', None) if settings else None
            pricing[station_type] = {
                'price_1_mad': float(solo) if solo is not None else defaults['price_1_mad'],
                'price_4_mad': float(group) if group is not None else defaults['price_4_mad'],
            }
        return pricing
