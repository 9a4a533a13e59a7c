from django.contrib.auth.models import AbstractUser
from django.db import models


class Division(models.TextChoices):
    CATCID = 'CATCID', 'CATCID'
    GACID = 'GACID', 'GACID'
    MOOCSU = 'MOOCSU', 'MOOCSU'
    EARD = 'EARD', 'EARD'
    SECRETARY = 'Secretary', 'Secretary'
    ADMIN = 'Admin', 'Admin'

    @classmethod
    def routing_divisions(cls):
        """The named divisions a document can be forwarded to for handling."""
        return (cls.CATCID, cls.GACID, cls.MOOCSU, cls.EARD)

    @classmethod
    def portal_divisions(cls):
        """Divisions whose accounts may sign in to the web portal."""
        return (cls.ADMIN, cls.SECRETARY)


class User(AbstractUser):
    name = models.CharField(max_length=150)
    email = models.EmailField(unique=True)
    division = models.CharField(max_length=20, choices=Division.choices)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name or self.username

    @property
    def forwarding_label(self):
        """How this user is written in a document's 'forwarded by' field."""
        return f"{self.name or self.username} ({self.division})"

    @property
    def can_use_portal(self):
        return self.division in Division.portal_divisions()
