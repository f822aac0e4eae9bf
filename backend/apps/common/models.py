# apps/common/models.py
"""
Tablas de referencia compartidas por todos los dominios.
Se cargan con `manage.py seed_reference_data`.
"""

from django.db import models


class Location(models.Model):
    name = models.CharField(max_length=50, unique=True)

    def __str__(self):
        return self.name


class Sport(models.Model):
    name = models.CharField(max_length=50, unique=True)
    icon_key = models.CharField(max_length=50, blank=True, default="")

    def __str__(self):
        return self.name


class Status(models.Model):
    name = models.CharField(max_length=50, unique=True)

    class Meta:
        verbose_name_plural = "statuses"

    def __str__(self):
        return self.name


class Payment(models.Model):
    name = models.CharField(max_length=50, unique=True)

    def __str__(self):
        return self.name


class Delivery(models.Model):
    name = models.CharField(max_length=50, unique=True)

    class Meta:
        verbose_name_plural = "deliveries"

    def __str__(self):
        return self.name


class InvoiceType(models.Model):
    name = models.CharField(max_length=50, unique=True)

    def __str__(self):
        return self.name
