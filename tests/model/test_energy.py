import pytest

from sngraph.config import RadioConfig
from sngraph.model.energy import RadioEnergyModel


def test_default_costs_in_micro_joules():
    model = RadioEnergyModel()
    # 4096 bits * 100 nJ/bit = 409.6 uJ
    assert model.transmission_energy(0) == 410
    # 409.6 + 4096 * 100 pJ * 900 m^2 = 778.24 uJ
    assert model.transmission_energy(30) == 778


def test_transmission_monotonic_in_distance():
    model = RadioEnergyModel()
    costs = [model.transmission_energy(d) for d in (0, 1, 5, 10, 25, 50, 100)]
    assert costs == sorted(costs)
    assert all(c >= 0 for c in costs)


def test_costs_grow_with_packet_size():
    small = RadioEnergyModel(RadioConfig(bits_per_packet=1024))
    large = RadioEnergyModel(RadioConfig(bits_per_packet=8192))
    assert small.transmission_energy(20) <= large.transmission_energy(20)
    assert small.receiving_cost(None) <= large.receiving_cost(None)
    assert small.storage_cost(None) <= large.storage_cost(None)


def test_receiving_cost_independent_of_distance():
    model = RadioEnergyModel()
    assert model.receiving_cost(None) == 410
    assert model.state_dependent is False


def test_invalid_radio_config():
    with pytest.raises(ValueError):
        RadioConfig(bits_per_packet=0)
    with pytest.raises(ValueError):
        RadioConfig(amp_energy=-1.0)
