# comics/admin_urls.py

from django.urls import path

from comics.views import ComicCoverUploadView, ComicFromDirectoryView, ComicPagesUploadView

app_name = "comics-admin"

urlpatterns = [
    path("from-directory/", ComicFromDirectoryView.as_view(), name="from-directory"),
    path("<slug:slug>/pages/", ComicPagesUploadView.as_view(), name="upload-pages"),
    path("<slug:slug>/cover/", ComicCoverUploadView.as_view(), name="upload-cover"),
]
