from django.urls import include, path

urlpatterns = [
    path('webhook/', include('labintake.urls')),
]
