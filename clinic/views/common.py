"""Helpers shared by the resource views."""
from __future__ import annotations

from django.db import IntegrityError, transaction

from clinic.exceptions import ConflictError, NotFoundError


def get_or_404(model, pk, message: str):
    obj = model.objects.filter(pk=pk).first()
    if obj is None:
        raise NotFoundError(message)
    return obj


def save_unique(serializer, conflict_message: str):
    """Save ``serializer``, turning a unique constraint violation into a 409."""
    try:
        with transaction.atomic():
            return serializer.save()
    except IntegrityError:
        raise ConflictError(conflict_message)
