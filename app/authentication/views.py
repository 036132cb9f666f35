"""
Authentication views.

Token issuance is handled by djangorestframework-simplejwt (see urls.py);
this module only exposes the current-user endpoint that clients use to
learn their role.
"""

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from authentication.serializers import UserSerializer
from core.responses import success_response


class MeView(APIView):
    """
    GET/PATCH /api/v1/auth/me/

    Returns or updates the authenticated user's profile fields.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(responses=UserSerializer, tags=["Auth"])
    def get(self, request):
        return success_response(UserSerializer(request.user).data)

    @extend_schema(request=UserSerializer, responses=UserSerializer, tags=["Auth"])
    def patch(self, request):
        serializer = UserSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return success_response(serializer.data, message="Profile updated")
