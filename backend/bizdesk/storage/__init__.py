"""对象存储层"""

from .supabase_storage import SupabaseStorage

__all__ = ["SupabaseStorage"]
