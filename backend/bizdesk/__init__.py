"""
bizdesk - 小型企业业务台后端核心

模块结构：
- config/     运行期配置与企业资料
- models/     数据模型定义
- export/     文档导出（截图/分页/打包PDF/投递/打印）
- hosts/      文档宿主实现（浏览器/本地目录）
- data/       托管后端数据访问与缓存集合
- storage/    对象存储
- auth/       当前用户与口令登录
- documents/  收货单等单据HTML渲染
"""

__version__ = "0.1.0"
