# Services package init
"""
FoodHub Backend - Services Layer
=================================

Service Inventory:
    - OrderStatusMachine: order states, terminal set, transition table
    - OrderService: order builder, provider transitions, customer cancellation,
      role-scoped listings
    - ReviewService: review eligibility gate
    - MealService: public meal browse, provider meal management
    - UserService: admin account listing and suspension
    - PrincipalService: identity header → Principal, role predicate

Services never touch HTTP objects. Each call receives the request's
AsyncSession explicitly.
"""
