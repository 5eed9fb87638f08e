"""
Management command to create one demo user per backend role.

Usernames are the role strings themselves (``system_admin``, ``chief_editor``
...) so every dashboard variant can be tried by logging in as the role.

Usage:
    python manage.py seed_newsroom_users --password secret123
"""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from newsroom import roles

User = get_user_model()


class Command(BaseCommand):
    """
    Django management command to create demo users.
    """

    help = 'Creates one demo user for every backend role string'

    def add_arguments(self, parser):
        parser.add_argument('--password', default='password123', help='Password for every demo user')
        parser.add_argument('--language', default='ar', choices=['ar', 'en', 'ur'])

    def handle(self, *args, **options):
        """
        Create or update the demo users.
        """
        self.stdout.write(self.style.SUCCESS('Creating demo users...'))

        for role, label in roles.BACKEND_ROLE_CHOICES:
            user, created = User.objects.get_or_create(
                username=role,
                defaults={
                    'email': f'{role}@example.com',
                    'role': role,
                    'first_name': label.split()[0],
                    'last_name': 'Demo',
                    'preferred_language': options['language'],
                }
            )
            user.role = role
            user.set_password(options['password'])
            user.save()

            action = 'Created' if created else 'Updated'
            self.stdout.write(
                self.style.SUCCESS(f'✓ {action} {user.username} ({role} -> {roles.map_role(role)})')
            )

        self.stdout.write(self.style.SUCCESS('Demo users ready.'))
