"""Enumeration types for billing entities."""

from enum import Enum


class ServiceType(int, Enum):
    ELECTRICITY = 1
    GAS = 2
