from django.urls import path
from . import views

urlpatterns = [
    # DFA operations
    path('api/check/', views.check_dfa, name='check_dfa'),
    path('api/minimize/', views.minimize_dfa, name='minimize_dfa'),

    # JSON-RPC endpoint exposing check and minimize as procedures
    path('rpc/', views.rpc_endpoint, name='rpc'),
]
