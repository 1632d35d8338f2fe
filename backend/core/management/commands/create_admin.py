from django.core.management.base import BaseCommand, CommandError
from django.contrib.auth import get_user_model

User = get_user_model()


class Command(BaseCommand):
    help = 'Create an admin user, or reset the password of an existing one'

    def add_arguments(self, parser):
        parser.add_argument('--email', required=True, help='Login email of the admin')
        parser.add_argument('--password', required=True, help='Password to set')
        parser.add_argument('--name', default='Admin', help='Display name (new users only)')

    def handle(self, *args, **options):
        email = options['email'].strip().lower()
        password = options['password']

        if len(password) < 6:
            raise CommandError('Password must be at least 6 characters')

        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            User.objects.create_superuser(email=email, password=password, name=options['name'])
            self.stdout.write(self.style.SUCCESS(f'Created admin user: {email}'))
            return

        user.set_password(password)
        user.role = User.ROLE_ADMIN
        user.is_active = True
        user.is_staff = True
        user.is_superuser = True
        user.save()
        user.projects.clear()
        self.stdout.write(self.style.SUCCESS(f'Reset password for existing user: {email} (role: admin)'))
