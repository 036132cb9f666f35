"""
URL configuration for projects API.

Routes:
    /                                - List/create projects
    /{id}/                           - Project detail, update, delete
    /{id}/apply/                     - Apply (POST)
    /{id}/applications/              - Applications (GET)
    /{id}/choose-applicant/          - Shortlist applicant (POST)
    /{id}/request-admin-management/  - Escalate (POST)
    /{id}/complete/                  - Complete (POST)
    /{id}/cancel/                    - Cancel (POST)
"""

from rest_framework.routers import DefaultRouter

from projects.views import ProjectViewSet

router = DefaultRouter()
router.register(r"", ProjectViewSet, basename="project")

app_name = "projects"
urlpatterns = router.urls
