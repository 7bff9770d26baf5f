from types import SimpleNamespace

from services.pricing_service import PricingService, round_money, DEFAULT_PRICING_BY_TYPE


def test_compute_cost_matches_reference_example():
    assert PricingService.compute_cost(40, 45) == 30.00


def test_compute_cost_rounds_cents_half_away_from_zero():
    # 50/60 * 33.33 = 27.775 exactly
    assert PricingService.compute_cost(33.33, 50) == 27.78
    # 5/60 * 0.3 = 0.025 exactly
    assert PricingService.compute_cost(0.3, 5) == 0.03
    assert PricingService.compute_cost(20, 100) == 33.33


def test_compute_cost_zero_rate_or_duration():
    assert PricingService.compute_cost(0, 120) == 0.0
    assert PricingService.compute_cost(55, 0) == 0.0


def test_compute_cost_is_monotonic_in_duration():
    for rate in (0, 12.5, 20, 33.33, 40, 55, 70):
        previous = -1
        for minutes in range(30, 481):
            cost = PricingService.compute_cost(rate, minutes)
            assert cost >= previous
            previous = cost


def test_select_rate_prefers_group_rate_when_configured():
    station = SimpleNamespace(price_solo=40, price_group=55)
    assert PricingService.select_rate(station, use_group_rate=True) == 55
    assert PricingService.select_rate(station, use_group_rate=False) == 40


def test_select_rate_falls_back_to_solo_without_group_rate():
    station = SimpleNamespace(price_solo=20, price_group=None)
    assert PricingService.select_rate(station, use_group_rate=True) == 20


def test_compute_total_rounds_each_part_then_the_sum():
    assert PricingService.compute_total(30, 12.345) == 42.35
    assert PricingService.compute_total(10.005, 0.005) == 10.02
    assert PricingService.compute_total(30, 0) == 30.0


def test_round_money_handles_negative_values_symmetrically():
    assert round_money(-1.005) == -1.01
    assert round_money(1.005) == 1.01


def test_pricing_by_type_uses_defaults_for_missing_values():
    assert PricingService.pricing_by_type(None) == DEFAULT_PRICING_BY_TYPE

    settings = SimpleNamespace(standard_ps5_price_1=45, xbox_price_4=30)
    pricing = PricingService.pricing_by_type(settings)
    assert pricing['standard_ps5'] == {'price_1_mad': 45.0, 'price_4_mad': 55.0}
    assert pricing['xbox'] == {'price_1_mad': 20.0, 'price_4_mad': 30.0}
    assert pricing['premium_ps5'] == {'price_1_mad': 50.0, 'price_4_mad': 70.0}
