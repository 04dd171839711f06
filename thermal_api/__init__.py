"""Servicio de inspección termográfica de subestaciones."""
