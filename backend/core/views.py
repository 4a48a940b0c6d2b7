"""
Small views that do not belong to any particular data set:
a health check for the deployment scripts and the login endpoint.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .responses import failure
from .serializers import LoginSerializer, UserSerializer

logger = logging.getLogger(__name__)


class HealthView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        return Response({"ok": True, "message": "Server is running"}, status=status.HTTP_200_OK)


class LoginView(APIView):
    """
    Check a mobile number / password pair and hand back the user object.

    No session is started here: the dashboard only stores the user id
    locally, the data routes themselves are public.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        username = serializer.validated_data["username"]
        user = authenticate(
            request,
            username=username,
            password=serializer.validated_data["password"],
        )
        if user is None:
            logger.warning("Failed login attempt for %s", username)
            return failure(
                "Invalid mobile number or password",
                status_code=status.HTTP_401_UNAUTHORIZED,
            )

        logger.info("User %s logged in", user.username)
        return Response(
            {"success": True, "message": "Login successful", "user": UserSerializer(user).data},
            status=status.HTTP_200_OK,
        )
