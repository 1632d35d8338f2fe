import logging
from datetime import datetime

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.settings import api_settings
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from .models import ActivityLog
from .permissions import IsAdminRole
from .serializers import UserSerializer, UserWriteSerializer, ActivityLogSerializer
from .utils import log_activity

logger = logging.getLogger('backend.core')

User = get_user_model()


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Email/password login returning the user alongside the token pair"""
    default_error_messages = {
        'no_active_account': 'Invalid email or password',
    }

    def validate(self, attrs):
        attrs[self.username_field] = attrs[self.username_field].strip().lower()
        try:
            data = super().validate(attrs)
        except AuthenticationFailed:
            logger.warning(f"Failed login attempt for {attrs[self.username_field]}")
            raise AuthenticationFailed('Invalid email or password', 'no_active_account')

        data['user'] = UserSerializer(self.user).data
        log_activity(
            request=self.context.get('request'),
            user=self.user,
            action='login',
            model_name='User',
            object_id=self.user.pk,
            object_name=self.user.email,
        )
        logger.info(f"User {self.user.email} logged in")
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['email'] = user.email
        token['role'] = user.role
        token['name'] = user.name
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh that rejects tokens of deleted or disabled users"""
    def validate(self, attrs):
        try:
            refresh = RefreshToken(attrs['refresh'])
        except TokenError:
            raise InvalidToken('Token is invalid or expired.')

        user_id = refresh.payload.get(api_settings.USER_ID_CLAIM)
        if not User.objects.filter(pk=user_id, is_active=True).exists():
            raise InvalidToken('Token is invalid. User no longer exists.')

        try:
            return super().validate(attrs)
        except TokenError:
            raise InvalidToken('Token is invalid or expired.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def health(request):
    """Liveness check"""
    return Response({'ok': True, 'service': 'realprop-backend'})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get the current user with role flag and assigned projects"""
    user_data = UserSerializer(request.user).data
    user_data['is_admin'] = request.user.is_admin
    return Response(user_data)


# User views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_list_create(request):
    """List all users or create a new user"""
    if request.method == 'GET':
        users = User.objects.prefetch_related('projects').order_by('-created_at', '-id')
        serializer = UserSerializer(users, many=True)
        return Response(serializer.data)

    serializer = UserWriteSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"User creation validation failed: {serializer.errors}")
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    user = serializer.save()
    log_activity(request, 'create', 'User', user.pk, object_name=user.email,
                 changes={'role': user.role, 'project_ids': [p.id for p in user.projects.all()]})
    logger.info(f"User {user.email} ({user.role}) created by {request.user.email}")
    return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_detail(request, pk):
    """Retrieve, update or delete a user"""
    user = get_object_or_404(User, pk=pk)

    if request.method == 'GET':
        return Response(UserSerializer(user).data)

    if request.method in ('PUT', 'PATCH'):
        # Password is optional on update, so PUT is applied partially as well
        serializer = UserWriteSerializer(user, data=request.data, partial=True)
        if not serializer.is_valid():
            logger.warning(f"User {pk} update validation failed: {serializer.errors}")
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        user = serializer.save()
        changed = sorted(key for key in request.data.keys() if key != 'password')
        log_activity(request, 'update', 'User', user.pk, object_name=user.email,
                     changes={'fields': changed, 'password_changed': bool(request.data.get('password'))})
        logger.info(f"User {pk} updated by {request.user.email}")
        return Response(UserSerializer(user).data)

    # DELETE
    if user.pk == request.user.pk:
        logger.warning(f"User {request.user.email} attempted to delete their own account")
        return Response({'error': 'Cannot delete your own account'}, status=status.HTTP_400_BAD_REQUEST)

    email = user.email
    user.delete()
    log_activity(request, 'delete', 'User', pk, object_name=email)
    logger.info(f"User {email} deleted by {request.user.email}")
    return Response({'message': 'User deleted successfully'})


def _parse_date(value):
    return datetime.strptime(value, '%Y-%m-%d').date()


# ActivityLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def activity_log_list(request):
    """List activity logs with filtering"""
    queryset = ActivityLog.objects.select_related('user')

    action_filter = request.query_params.get('action')
    if action_filter:
        queryset = queryset.filter(action=action_filter)

    model_filter = request.query_params.get('model')
    if model_filter:
        queryset = queryset.filter(model_name__iexact=model_filter)

    date_from = request.query_params.get('date_from')
    date_to = request.query_params.get('date_to')
    try:
        if date_from:
            queryset = queryset.filter(created_at__date__gte=_parse_date(date_from))
        if date_to:
            queryset = queryset.filter(created_at__date__lte=_parse_date(date_to))
    except ValueError:
        return Response({'error': 'Invalid date format. Use YYYY-MM-DD'}, status=status.HTTP_400_BAD_REQUEST)

    queryset = queryset.order_by('-created_at', '-id')
    serializer = ActivityLogSerializer(queryset, many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def activity_log_detail(request, pk):
    """Retrieve an activity log entry"""
    activity_log = get_object_or_404(ActivityLog, pk=pk)
    serializer = ActivityLogSerializer(activity_log)
    return Response(serializer.data)
