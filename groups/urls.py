from rest_framework.routers import DefaultRouter

from .views import CommentViewSet, GroupViewSet, PostViewSet

router = DefaultRouter()
router.register(r"groups/posts", PostViewSet, basename="group-post")
router.register(r"groups/comments", CommentViewSet, basename="group-comment")
router.register(r"groups", GroupViewSet, basename="group")

urlpatterns = router.urls
