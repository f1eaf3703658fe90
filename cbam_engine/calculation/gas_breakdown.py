# -*- coding: utf-8 -*-
"""
Per-gas emission breakdowns.

Direct, process and embedded breakdowns share one summation: for every
record, multiply its quantity by the resolved factor of each gas and sum
per gas. ``total`` is the sum of the four gases.
"""

from typing import Callable, Iterable, TypeVar

from cbam_engine.models import EmissionsByGasType, GasType

RecordT = TypeVar("RecordT")

GAS_TYPES = (GasType.CO2, GasType.CH4, GasType.N2O, GasType.OTHER_GWP)


def sum_by_gas(
    records: Iterable[RecordT],
    quantity: Callable[[RecordT], float],
    factor: Callable[[RecordT, GasType], float],
) -> EmissionsByGasType:
    """Sum ``quantity(record) * factor(record, gas)`` per gas over ``records``.

    Args:
        records: Records to aggregate.
        quantity: Activity quantity of a record.
        factor: Resolved emission factor of a record for one gas.

    Returns:
        EmissionsByGasType with ``total`` equal to the sum of all gases.
    """
    sums = {gas: 0.0 for gas in GAS_TYPES}
    for record in records:
        amount = quantity(record)
        for gas in GAS_TYPES:
            sums[gas] += amount * factor(record, gas)
    return EmissionsByGasType.from_parts(
        co2=sums[GasType.CO2],
        ch4=sums[GasType.CH4],
        n2o=sums[GasType.N2O],
        other_gwp=sums[GasType.OTHER_GWP],
    )
