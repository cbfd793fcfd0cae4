from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView
from django.urls import reverse_lazy

urlpatterns = [
    path('admin/', admin.site.urls),
    path('accounts/', include(('accounts.urls', 'accounts'), namespace='accounts')),
    path('fields/', include(('catalog.urls', 'catalog'), namespace='catalog')),
    path('traffic/', include(('traffic.urls', 'traffic'), namespace='traffic')),
    path('comments/', include(('comments.urls', 'comments'), namespace='comments')),
    path('', RedirectView.as_view(url=reverse_lazy('catalog:field_list'), permanent=False)),
]
