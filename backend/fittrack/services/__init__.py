# Services package init
"""
FitTrack Backend — Services Layer
===================================

Service Inventory:
    - entry_validator: Pure domain rules for workout entries
    - workout_store:   WorkoutStore, transactional workout aggregate persistence
    - user_store:      UserStore, user create/lookup/update
    - db_errors:       Database error classification and deadlines shared by the stores
"""
