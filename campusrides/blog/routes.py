"""Routes for the blog blueprint."""

from flask import g, jsonify, request

from campusrides.auth.decorators import login_required
from campusrides.core.constants import DEFAULT_BLOG_PAGE_SIZE
from campusrides.core.context import get_context
from campusrides.core.responses import first_form_error, respond
from campusrides.errors import NotFoundError, ValidationError

from . import bp
from .forms import BlogForm
from .services import BlogService


@bp.route("/", methods=["GET"])
def list_blogs():
    """List posts, filtered by category, author or title prefix, one page at a time."""
    db = get_context().db
    category = request.args.get("category")
    author = request.args.get("author")
    search_term = request.args.get("search")

    if category:
        return jsonify({"blogs": BlogService.get_blogs_by_category(db, category)})
    if author:
        return jsonify({"blogs": BlogService.get_blogs_by_author(db, author)})
    if search_term:
        return jsonify({"blogs": BlogService.search_blogs_by_title(db, search_term)})

    limit_count = request.args.get("limit", DEFAULT_BLOG_PAGE_SIZE, type=int)
    blogs, cursor = BlogService.get_paginated_blogs(
        db, limit_count, request.args.get("after")
    )
    return jsonify({"blogs": blogs, "next": cursor})


@bp.route("/categories", methods=["GET"])
def list_categories():
    """List the categories in use."""
    return jsonify({"categories": BlogService.get_blog_categories(get_context().db)})


@bp.route("/<string:slug>", methods=["GET"])
def view_blog(slug):
    """Show a single post."""
    blog = BlogService.get_blog_by_slug(get_context().db, slug)
    if blog is None:
        raise NotFoundError("Blog not found.")
    return jsonify({"blog": blog})


@bp.route("/create", methods=["POST"])
@login_required
def create_blog():
    """Publish a post as the current user."""
    form = BlogForm()
    if not form.validate_on_submit():
        raise ValidationError(first_form_error(form))

    context = get_context()
    result = BlogService.create_blog(
        context.db,
        context.bucket,
        title=form.title.data,
        excerpt=form.excerpt.data or "",
        content=form.content.data,
        author=(g.user or {}).get("fullName") or "Anonymous",
        category=form.category.data,
        image=form.image.data,
        slug=form.slug.data,
    )
    return respond(result, 201)
