# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from pydantic import BaseModel

from training_ledger.money import Money
from training_ledger.types import ZERO


class Tariff(BaseModel, frozen=True):
    """A priced variant of a catalog product."""

    id: str
    product_id: str
    price_excl_tax: Money = ZERO
    is_default: bool = False
    label: str = ""


class TariffSource(ABC):
    """
    Read contract for catalog tariffs.

    Implementors may back this with any relational store. Both methods take a
    whole batch of ids so a consolidation costs one round trip per method,
    never one per training need.
    """

    @abstractmethod
    def default_tariffs(self, product_ids: Iterable[str]) -> list[Tariff]:
        """Return the tariffs flagged as default for the given products."""
        ...

    @abstractmethod
    def tariffs_by_id(self, tariff_ids: Iterable[str]) -> list[Tariff]:
        """Return the tariffs with the given ids."""
        ...


class MemoryTariffSource(TariffSource):
    """
    In-process tariff catalog, suitable for tests, examples and callers that
    already hold the tariff rows.
    """

    def __init__(self, tariffs: Iterable[Tariff] = ()) -> None:
        self._tariffs: dict[str, Tariff] = {}
        for tariff in tariffs:
            self.save_tariff(tariff)

    def save_tariff(self, tariff: Tariff) -> None:
        self._tariffs[tariff.id] = tariff

    def default_tariffs(self, product_ids: Iterable[str]) -> list[Tariff]:
        wanted = set(product_ids)
        return [
            tariff
            for tariff in self._tariffs.values()
            if tariff.is_default and tariff.product_id in wanted
        ]

    def tariffs_by_id(self, tariff_ids: Iterable[str]) -> list[Tariff]:
        return [self._tariffs[tariff_id] for tariff_id in tariff_ids if tariff_id in self._tariffs]
