from rest_framework import serializers
from .models import User, ActivityLog


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact author/assignee representation embedded in other records"""
    class Meta:
        model = User
        fields = ['id', 'name', 'email']


class UserSerializer(serializers.ModelSerializer):
    project_ids = serializers.SerializerMethodField()
    projects = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'role', 'is_active', 'project_ids', 'projects', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def get_project_ids(self, obj):
        return [project.id for project in obj.projects.all()]

    def get_projects(self, obj):
        return [{'id': project.id, 'name': project.name} for project in obj.projects.all()]


class UserWriteSerializer(serializers.ModelSerializer):
    """
    Create or update a user.

    `project_id` replaces the user's project assignment. Managers must
    end up with at least one project.
    """
    password = serializers.CharField(write_only=True, min_length=6, required=False)
    role = serializers.ChoiceField(
        choices=User.ROLE_CHOICES, required=False,
        error_messages={'invalid_choice': 'Invalid role. Must be admin or manager'}
    )
    project_id = serializers.IntegerField(write_only=True, required=False, allow_null=True)
    email = serializers.EmailField()

    class Meta:
        model = User
        fields = ['name', 'email', 'password', 'role', 'is_active', 'project_id']

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Name is required')
        return value

    def validate_email(self, value):
        value = value.strip().lower()
        queryset = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError('Email already exists')
        return value

    def validate_project_id(self, value):
        if value in (None, ''):
            return None
        from backend.projects.models import Project
        project = Project.objects.filter(pk=value).first()
        if project is None:
            raise serializers.ValidationError('Project not found')
        return project

    def validate(self, attrs):
        if self.instance is None and not attrs.get('password'):
            raise serializers.ValidationError({'password': 'Password is required'})

        role = attrs.get('role', self.instance.role if self.instance else User.ROLE_MANAGER)
        if 'project_id' in attrs:
            has_project = attrs['project_id'] is not None
        else:
            has_project = self.instance is not None and self.instance.projects.exists()

        if role == User.ROLE_MANAGER and not has_project:
            raise serializers.ValidationError({'project_id': 'Project assignment is required for managers'})
        return attrs

    def create(self, validated_data):
        project = validated_data.pop('project_id', None)
        password = validated_data.pop('password')
        user = User.objects.create_user(password=password, **validated_data)
        # Only managers carry project assignments
        if project is not None and user.role == User.ROLE_MANAGER:
            user.projects.add(project)
        return user

    def update(self, instance, validated_data):
        replace_projects = 'project_id' in validated_data
        project = validated_data.pop('project_id', None)
        password = validated_data.pop('password', None)

        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()

        if instance.role != User.ROLE_MANAGER:
            instance.projects.clear()
        elif replace_projects:
            instance.projects.set([project] if project is not None else [])
        return instance


class ActivityLogSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = ActivityLog
        fields = ['id', 'user', 'action', 'model_name', 'object_id', 'object_name',
                  'changes', 'ip_address', 'created_at']
