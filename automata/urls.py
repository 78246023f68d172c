from django.urls import path
from . import views

urlpatterns = [
    # Language equivalence of two DFAs
    path('api/check-equivalence/', views.check_dfa_equivalence, name='check_equivalence'),

    # Single DFA utilities
    path('api/dfa-accepts/', views.dfa_accepts, name='dfa_accepts'),
    path('api/dfa-table/', views.dfa_table, name='dfa_table'),
    path('api/dfa-to-nfa/', views.dfa_to_nfa, name='dfa_to_nfa'),
]
