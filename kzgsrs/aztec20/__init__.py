"""Aztec ignition (2020) 세리머니."""
