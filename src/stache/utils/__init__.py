"""Utility helpers for stache."""
