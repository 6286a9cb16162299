"""
Centralized Blueprint Registration
All blueprints MUST be registered inside register_all_blueprints(app)
"""

def register_all_blueprints(app):

    # Root / health
    from backend.routes.root.root_routes import root_bp
    app.register_blueprint(root_bp)

    # Accounts
    from backend.routes.auth.auth_routes import auth_bp
    from backend.routes.user.user_routes import user_bp
    app.register_blueprint(auth_bp)
    app.register_blueprint(user_bp)

    # Catalog
    from backend.routes.listing.listing_routes import listing_bp
    from backend.routes.products.product_routes import products_bp
    app.register_blueprint(listing_bp)
    app.register_blueprint(products_bp)

    # Shopping
    from backend.routes.shop.cart_routes import cart_bp
    from backend.routes.shop.wishlist_routes import wishlist_bp
    from backend.routes.shop.order_routes import orders_bp
    app.register_blueprint(cart_bp)
    app.register_blueprint(wishlist_bp)
    app.register_blueprint(orders_bp)

    # Admin
    from backend.routes.admin.admin_routes import admin_bp
    app.register_blueprint(admin_bp)

    # Reference data
    from backend.routes.reference.reference_routes import reference_bp
    app.register_blueprint(reference_bp)

    print("✓ All blueprints registered")
