"""Cart constants."""

from django.db import models


class LineCategory(models.TextChoices):
    CUSTOM_DESIGN = "custom_design", "Custom design"
    APPAREL = "apparel", "Apparel"
    BULK = "bulk", "Bulk"


DEFAULT_LINE_TITLE = "Custom Product"
